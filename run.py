#!/usr/bin/env python3
"""
Payment Engine Entry Point

Processes a transaction CSV from a source checkout and prints account balances.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from payment_engine.cli import main


if __name__ == "__main__":
    sys.exit(main())
