"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged as a structured event.
This provides:
1. Traceability from a balance back to the records that moved it
2. Debugging capability

The audit logger:
- Only logs locally (structlog JSON lines); nothing is persisted
- Never raises into the caller's flow
- Supports correlation IDs to tie together the events of one operation
"""

import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog to emit JSON lines.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Routes each event to the structlog method matching its severity.
    """

    def __init__(self):
        self._logger = structlog.get_logger("finance_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written, False if logging failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (TypeError, ValueError, OSError) as e:
            # A broken handler must not undo a committed ledger write
            logging.getLogger(__name__).error("audit_log_failed: %s", e)
            return False

        return True

    async def log_account_changed(
        self,
        account_id: int,
        action: str,
        name: str,
        balance: Decimal,
        correlation_id: UUID,
    ) -> None:
        """Log an account create, update or delete."""
        event = AuditEventBuilder.account_changed(
            account_id=account_id,
            action=action,
            name=name,
            balance=balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_adjusted(
        self,
        account_id: int,
        delta: Decimal,
        new_balance: Decimal,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.balance_adjusted(
            account_id=account_id,
            delta=delta,
            new_balance=new_balance,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_recorded(
        self,
        kind: str,
        transaction_id: int,
        action: str,
        amount: Decimal,
        account_id: Optional[int],
        correlation_id: UUID,
    ) -> None:
        """Log an income or expense write."""
        event = AuditEventBuilder.transaction_recorded(
            kind=kind,
            transaction_id=transaction_id,
            action=action,
            amount=amount,
            account_id=account_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_rejected(
        self,
        kind: str,
        reason: str,
        details: dict,
        correlation_id: UUID,
        transaction_id: Optional[int] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_rejected(
            kind=kind,
            reason=reason,
            details=details,
            correlation_id=correlation_id,
            transaction_id=transaction_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a ledger operation and pass it to every
    event the operation emits.
    """
    return uuid4()
