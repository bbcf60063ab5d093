"""
Console Entry Point for Expense Manager

Run with:
    python -m app.main

or, once installed, with the `expense-manager` command.
"""

import sys

from expense_manager.orchestrator import main


if __name__ == "__main__":
    sys.exit(main())
