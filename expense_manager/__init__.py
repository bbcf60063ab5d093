"""
Expense Manager - Source Package

A single-user console expense tracker: register or log in, record
expenses, list and total them by category, and save or load the
whole ledger as one snapshot file.

DESIGN PRINCIPLES:
1. No global state: the application context owns every service
2. Input errors never end the session
3. A failed load never touches the ledger
4. Every user action is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Manager Team"
