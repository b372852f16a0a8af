"""
Tax Package

Static 2024 bracket tables and the progressive calculator over them.
"""

from finance_tracker.tax.brackets import (
    FEDERAL_BRACKETS,
    NO_INCOME_TAX_STATES,
    STANDARD_DEDUCTIONS,
    STATE_BRACKETS,
    TAX_YEAR,
    federal_brackets,
    standard_deduction,
    state_brackets,
    top_marginal_rate,
)
from finance_tracker.tax.calculator import (
    InvalidFilingStatusError,
    InvalidIncomeError,
    TaxCalculationError,
    TaxCalculator,
    UnsupportedJurisdictionError,
    calculate_tax,
    calculate_tax_liability,
    parse_filing_status,
)

__all__ = [
    # Tables
    "FEDERAL_BRACKETS",
    "NO_INCOME_TAX_STATES",
    "STANDARD_DEDUCTIONS",
    "STATE_BRACKETS",
    "TAX_YEAR",
    "federal_brackets",
    "standard_deduction",
    "state_brackets",
    "top_marginal_rate",
    # Calculator
    "InvalidFilingStatusError",
    "InvalidIncomeError",
    "TaxCalculationError",
    "TaxCalculator",
    "UnsupportedJurisdictionError",
    "calculate_tax",
    "calculate_tax_liability",
    "parse_filing_status",
]
