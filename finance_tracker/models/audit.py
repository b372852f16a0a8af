"""
Audit Models for Finance Tracker

Every ledger mutation is described by an audit event. Events are emitted
as structured log lines so a balance can be traced back to the income or
expense that moved it.

DESIGN DECISION: Events are logged, not persisted. The tracker keeps no
historical balance trail of its own.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.ledger import utcnow


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every ledger path has its own event type.
    """
    # Accounts
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    BALANCE_ADJUSTED = "balance_adjusted"

    # Ledger transactions
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_CREATED = "income_created"
    INCOME_UPDATED = "income_updated"
    INCOME_DELETED = "income_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Tax
    TAX_CALCULATED = "tax_calculated"
    JURISDICTION_UNSUPPORTED = "jurisdiction_unsupported"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit log.
    Every ledger mutation creates at least one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'expense', 'income')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one ledger operation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.balance_adjusted(account_id, delta, balance, "refund", cid)
        event = AuditEventBuilder.transaction_recorded("expense", expense_id, "created", amount, account_id, cid)
    """

    @staticmethod
    def account_changed(
        account_id: int,
        action: str,
        name: str,
        balance: Decimal,
        correlation_id: UUID
    ) -> AuditEvent:
        event_type = {
            "created": AuditEventType.ACCOUNT_CREATED,
            "updated": AuditEventType.ACCOUNT_UPDATED,
            "deleted": AuditEventType.ACCOUNT_DELETED,
        }[action]
        return AuditEvent(
            event_type=event_type,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account {action}: {name}",
            details={
                "name": name,
                "balance": str(balance),
            },
        )

    @staticmethod
    def balance_adjusted(
        account_id: int,
        delta: Decimal,
        new_balance: Decimal,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Balance {reason}: {delta:+} (now {new_balance})",
            details={
                "delta": str(delta),
                "new_balance": str(new_balance),
                "reason": reason,
            },
        )

    @staticmethod
    def transaction_recorded(
        kind: str,
        transaction_id: int,
        action: str,
        amount: Decimal,
        account_id: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        event_type = AuditEventType(f"{kind}_{action}")
        return AuditEvent(
            event_type=event_type,
            entity_type=kind,
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} {action}: {amount}",
            details={
                "amount": str(amount),
                "account_id": account_id,
            },
        )

    @staticmethod
    def transaction_rejected(
        kind: str,
        reason: str,
        details: dict[str, Any],
        correlation_id: UUID,
        transaction_id: Optional[int] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=kind,
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} rejected: {reason}",
            details=details,
            error_message=reason,
        )

    @staticmethod
    def tax_calculated(
        income: Decimal,
        filing_status: str,
        state: Optional[str],
        total_tax: Decimal
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TAX_CALCULATED,
            severity=AuditSeverity.DEBUG,
            entity_type="tax",
            description=f"Tax calculated: {total_tax} on {income}",
            details={
                "income": str(income),
                "filing_status": filing_status,
                "state": state,
                "total_tax": str(total_tax),
            },
        )

    @staticmethod
    def jurisdiction_unsupported(state: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.JURISDICTION_UNSUPPORTED,
            severity=AuditSeverity.WARNING,
            entity_type="tax",
            description=f"No bracket table for state {state}; state tax treated as zero",
            details={"state": state},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
