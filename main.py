#!/usr/bin/env python3
"""RollCall — entry point.

Run with:
    python main.py --period month
    python -m rollcall
"""

import sys

from rollcall.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
