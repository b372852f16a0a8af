"""
Finance Tracker - Source Package

A single-tenant personal finance tracker: accounts, incomes, expenses,
debts, subscriptions and categories behind a JSON API, plus a local
US income-tax calculator.

DESIGN PRINCIPLES:
1. Account balances always match the transactions linked to them
2. Every ledger mutation is one atomic unit of work
3. Fail early, fail visibly
4. Every ledger step is logged as a structured audit event
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
