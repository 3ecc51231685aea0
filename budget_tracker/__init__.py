"""
Budget Tracker - Source Package

A personal finance ledger that records income and expense entries
and produces date-range summary reports.

DESIGN PRINCIPLES:
1. One file per calendar day
2. Fail early, fail visibly
3. Validation happens once, before any disk I/O
4. Every addition is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
