"""
Budget Advisor - Source Package

A personal-finance toolkit: a rule-based allocation engine that turns a
household's income, expenses, debts and savings goals into a monthly plan,
plus an investment allocation ledger and expense tracking.

DESIGN PRINCIPLES:
1. The allocation engine is a pure function of its snapshot
2. Fail early on unusable input, report everything else in-band
3. No silent corrections
4. Every user action is auditable
"""

__version__ = "1.0.0"
__author__ = "Budget Advisor Team"
