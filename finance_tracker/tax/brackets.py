"""
Tax Bracket Tables (tax year 2024)

Static, immutable configuration. Tables are keyed by FilingStatus and
StateCode enums; every enum member must have an entry.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional, Union

from finance_tracker.models.tax import FilingStatus, StateCode, TaxBracket


TAX_YEAR = 2024

BracketRow = tuple[int, Optional[int], str]


def _table(rows: list[BracketRow]) -> tuple[TaxBracket, ...]:
    """Build an ascending bracket table from (min, max, rate) rows."""
    return tuple(
        TaxBracket(
            min=Decimal(low),
            max=Decimal(high) if high is not None else None,
            rate=Decimal(rate),
        )
        for low, high, rate in rows
    )


FEDERAL_BRACKETS: Mapping[FilingStatus, tuple[TaxBracket, ...]] = MappingProxyType({
    FilingStatus.SINGLE: _table([
        (0, 11600, "0.10"),
        (11600, 47150, "0.12"),
        (47150, 100525, "0.22"),
        (100525, 191950, "0.24"),
        (191950, 243725, "0.32"),
        (243725, 609350, "0.35"),
        (609350, None, "0.37"),
    ]),
    FilingStatus.MARRIED_FILING_JOINTLY: _table([
        (0, 23200, "0.10"),
        (23200, 94300, "0.12"),
        (94300, 201050, "0.22"),
        (201050, 383900, "0.24"),
        (383900, 487450, "0.32"),
        (487450, 731200, "0.35"),
        (731200, None, "0.37"),
    ]),
    FilingStatus.MARRIED_FILING_SEPARATELY: _table([
        (0, 11600, "0.10"),
        (11600, 47150, "0.12"),
        (47150, 100525, "0.22"),
        (100525, 191950, "0.24"),
        (191950, 243725, "0.32"),
        (243725, 365600, "0.35"),
        (365600, None, "0.37"),
    ]),
    FilingStatus.HEAD_OF_HOUSEHOLD: _table([
        (0, 16550, "0.10"),
        (16550, 63100, "0.12"),
        (63100, 100500, "0.22"),
        (100500, 191950, "0.24"),
        (191950, 243700, "0.32"),
        (243700, 609350, "0.35"),
        (609350, None, "0.37"),
    ]),
})

STANDARD_DEDUCTIONS: Mapping[FilingStatus, Decimal] = MappingProxyType({
    FilingStatus.SINGLE: Decimal("14600"),
    FilingStatus.MARRIED_FILING_JOINTLY: Decimal("29200"),
    FilingStatus.MARRIED_FILING_SEPARATELY: Decimal("14600"),
    FilingStatus.HEAD_OF_HOUSEHOLD: Decimal("21900"),
})

# States apply no standard deduction here
STATE_BRACKETS: Mapping[StateCode, tuple[TaxBracket, ...]] = MappingProxyType({
    StateCode.CA: _table([
        (0, 10099, "0.01"),
        (10099, 23942, "0.02"),
        (23942, 37788, "0.04"),
        (37788, 52455, "0.06"),
        (52455, 66295, "0.08"),
        (66295, 349137, "0.09"),
        (349137, 698274, "0.10"),
        (698274, None, "0.11"),
    ]),
    StateCode.NY: _table([
        (0, 8500, "0.04"),
        (8500, 11700, "0.045"),
        (11700, 13900, "0.0525"),
        (13900, 21400, "0.059"),
        (21400, 80650, "0.0597"),
        (80650, 215400, "0.0633"),
        (215400, 1077550, "0.0657"),
        (1077550, None, "0.0685"),
    ]),
    StateCode.IL: _table([
        (0, 10000, "0.045"),
        (10000, 20000, "0.048"),
        (20000, 100000, "0.053"),
        (100000, 250000, "0.062"),
        (250000, None, "0.0695"),
    ]),
    StateCode.MA: _table([
        (0, 1000000, "0.05"),
        (1000000, None, "0.053"),
    ]),
    StateCode.TX: (),
    StateCode.FL: (),
    StateCode.NV: (),
    StateCode.WA: (),
    StateCode.WY: (),
    StateCode.SD: (),
    StateCode.AK: (),
})

NO_INCOME_TAX_STATES = frozenset(code for code, table in STATE_BRACKETS.items() if not table)


def federal_brackets(filing_status: FilingStatus) -> tuple[TaxBracket, ...]:
    return FEDERAL_BRACKETS[filing_status]


def standard_deduction(filing_status: FilingStatus) -> Decimal:
    return STANDARD_DEDUCTIONS[filing_status]


def state_brackets(state: Union[StateCode, str]) -> Optional[tuple[TaxBracket, ...]]:
    """
    Bracket table for a state code.

    Returns an empty tuple for states without income tax and None for
    codes the calculator has no table for.
    """
    try:
        code = StateCode(state.upper() if isinstance(state, str) else state)
    except ValueError:
        return None
    return STATE_BRACKETS[code]


def top_marginal_rate(brackets: tuple[TaxBracket, ...]) -> Decimal:
    return brackets[-1].rate if brackets else Decimal("0")
