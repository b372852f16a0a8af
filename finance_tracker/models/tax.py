"""
Tax Models

Schemas for the progressive income-tax calculator: filing statuses,
jurisdictions, bracket tables and calculation results.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


TaxAmount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class FilingStatus(str, Enum):
    """IRS filing status. Selects the federal bracket table and standard deduction."""
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"


class StateCode(str, Enum):
    """
    States the calculator knows about.

    Either a bracket table is modeled for the state, or the state levies
    no income tax at all.
    """
    # Modeled bracket tables
    CA = "CA"
    NY = "NY"
    IL = "IL"
    MA = "MA"

    # No state income tax
    TX = "TX"
    FL = "FL"
    NV = "NV"
    WA = "WA"
    WY = "WY"
    SD = "SD"
    AK = "AK"


class TaxBracket(BaseModel):
    """One marginal bracket: income in (min, max] is taxed at rate."""

    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(..., ge=0)
    max: Optional[Decimal] = Field(
        default=None,
        description="Upper bound; None for the top, unbounded bracket"
    )
    rate: Decimal = Field(..., ge=0, le=1)


class _TaxModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BracketDetail(_TaxModel):
    """How much income fell into one bracket and the tax it produced."""

    rate: TaxAmount
    taxable_amount: TaxAmount
    tax: TaxAmount


class BracketCalculation(_TaxModel):
    """Result of running one bracket table over one income."""

    tax: TaxAmount
    brackets: list[BracketDetail] = Field(default_factory=list)


class FederalBreakdown(_TaxModel):
    filing_status: FilingStatus
    standard_deduction: TaxAmount
    taxable_income: TaxAmount
    brackets: list[BracketDetail] = Field(default_factory=list)


class StateBreakdown(_TaxModel):
    code: Optional[str] = None
    rate: TaxAmount = Field(
        default=Decimal("0"),
        description="Top marginal rate of the state's table (0 if none)"
    )
    tax: TaxAmount = Decimal("0")
    brackets: list[BracketDetail] = Field(default_factory=list)
    supported: bool = Field(
        default=True,
        description="False when the state code has no table and was treated as zero tax"
    )


class TaxBreakdown(_TaxModel):
    federal: FederalBreakdown
    state: StateBreakdown


class TaxCalculationRequest(_TaxModel):
    """
    Input to POST /tax/calculate.

    filing_status is validated by the calculator rather than by the schema
    so an unknown value surfaces as InvalidFilingStatusError.
    """

    income: Decimal
    state: Optional[str] = None
    filing_status: str


class TaxCalculationResult(_TaxModel):
    """Federal + state tax owed on one income."""

    income: TaxAmount
    federal_tax: TaxAmount
    state_tax: TaxAmount
    total_tax: TaxAmount
    effective_rate: TaxAmount
    take_home: TaxAmount
    breakdown: TaxBreakdown
    tax_year: int
    source: str = "local_calculation"
