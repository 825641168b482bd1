#!/usr/bin/env python3
"""
Roster Check - validate a roster file and write statistics / swap suggestions

Usage:
  python scripts/run_analysis.py roster.xlsx
  python scripts/run_analysis.py roster.csv --swap "ayşe:6" --strict

Outputs to outputs/ directory.
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from shiftcheck.analyze import main

if __name__ == "__main__":
    sys.exit(main())
