"""
Progressive Tax Calculator

Pure computation over the static bracket tables. No storage, no state.

Numeric semantics: Decimal throughout, no rounding of intermediate
bracket amounts. Rounding is left to whoever displays the result.
"""

from decimal import Decimal
from typing import Optional, Union

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.tax import (
    BracketCalculation,
    BracketDetail,
    FederalBreakdown,
    FilingStatus,
    StateBreakdown,
    TaxBracket,
    TaxBreakdown,
    TaxCalculationResult,
)
from finance_tracker.tax.brackets import (
    TAX_YEAR,
    federal_brackets,
    standard_deduction,
    state_brackets,
    top_marginal_rate,
)


ZERO = Decimal("0")


class TaxCalculationError(Exception):
    """Base exception for tax calculation failures."""
    pass


class InvalidFilingStatusError(TaxCalculationError):
    def __init__(self, filing_status: object):
        self.filing_status = filing_status
        valid = ", ".join(status.value for status in FilingStatus)
        super().__init__(f"Invalid filing status. Must be one of: {valid}")


class InvalidIncomeError(TaxCalculationError):
    def __init__(self, income: Decimal):
        self.income = income
        super().__init__("Income must be a non-negative amount")


class UnsupportedJurisdictionError(TaxCalculationError):
    def __init__(self, state: str):
        self.state = state
        super().__init__(f"No state tax table for '{state}'")


def calculate_tax(
    income: Decimal,
    brackets: tuple[TaxBracket, ...],
    deduction: Decimal = ZERO,
) -> BracketCalculation:
    """
    Apply marginal brackets to income after a deduction.

    Brackets must be ascending. Income exactly at a bracket's upper bound
    is taxed entirely at that bracket's rate and nothing spills over.
    """
    taxable = max(ZERO, income - deduction)
    total = ZERO
    details = []

    for bracket in brackets:
        if taxable <= bracket.min:
            continue
        upper = bracket.max if bracket.max is not None else taxable
        amount = min(taxable, upper) - bracket.min
        bracket_tax = amount * bracket.rate
        total += bracket_tax
        details.append(BracketDetail(rate=bracket.rate, taxable_amount=amount, tax=bracket_tax))

    return BracketCalculation(tax=total, brackets=details)


def parse_filing_status(value: Union[FilingStatus, str]) -> FilingStatus:
    try:
        return FilingStatus(value)
    except ValueError:
        raise InvalidFilingStatusError(value) from None


def calculate_tax_liability(
    income: Decimal,
    state: Optional[str],
    filing_status: Union[FilingStatus, str],
    strict: bool = False,
) -> TaxCalculationResult:
    """
    Federal plus state tax on one income.

    Args:
        income: Gross annual income, non-negative
        state: Two-letter state code, or None for federal only
        filing_status: One of the FilingStatus values
        strict: Raise for state codes without a table instead of
            treating their tax as zero

    Raises:
        InvalidFilingStatusError: Unknown filing status
        InvalidIncomeError: Negative income
        UnsupportedJurisdictionError: Unknown state code in strict mode
    """
    status = parse_filing_status(filing_status)
    income = Decimal(income)
    if income < 0:
        raise InvalidIncomeError(income)

    deduction = standard_deduction(status)
    federal = calculate_tax(income, federal_brackets(status), deduction)

    code = state.strip().upper() if state and state.strip() else None
    supported = True
    table: tuple[TaxBracket, ...] = ()
    if code is not None:
        found = state_brackets(code)
        if found is None:
            if strict:
                raise UnsupportedJurisdictionError(code)
            supported = False
        else:
            table = found
    state_result = calculate_tax(income, table, ZERO)

    total = federal.tax + state_result.tax
    effective_rate = total / income if income > 0 else ZERO

    return TaxCalculationResult(
        income=income,
        federal_tax=federal.tax,
        state_tax=state_result.tax,
        total_tax=total,
        effective_rate=effective_rate,
        take_home=income - total,
        breakdown=TaxBreakdown(
            federal=FederalBreakdown(
                filing_status=status,
                standard_deduction=deduction,
                taxable_income=max(ZERO, income - deduction),
                brackets=federal.brackets,
            ),
            state=StateBreakdown(
                code=code,
                rate=top_marginal_rate(table),
                tax=state_result.tax,
                brackets=state_result.brackets,
                supported=supported,
            ),
        ),
        tax_year=TAX_YEAR,
    )


class TaxCalculator:
    """
    Tax calculator bound to the jurisdiction policy from settings.

    Wraps calculate_tax_liability and audits each calculation.
    """

    def __init__(self, strict_jurisdictions: bool = False, audit_logger: Optional[AuditLogger] = None):
        self._strict = strict_jurisdictions
        self._audit = audit_logger or AuditLogger()

    @property
    def strict_jurisdictions(self) -> bool:
        return self._strict

    async def calculate(
        self,
        income: Decimal,
        state: Optional[str],
        filing_status: Union[FilingStatus, str],
    ) -> TaxCalculationResult:
        result = calculate_tax_liability(income, state, filing_status, strict=self._strict)

        if not result.breakdown.state.supported:
            await self._audit.log(
                AuditEventBuilder.jurisdiction_unsupported(result.breakdown.state.code)
            )
        await self._audit.log(
            AuditEventBuilder.tax_calculated(
                income=result.income,
                filing_status=result.breakdown.federal.filing_status.value,
                state=result.breakdown.state.code,
                total_tax=result.total_tax,
            )
        )
        return result
