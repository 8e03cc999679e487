#!/usr/bin/env python3
"""JournalQuest — entry point.

Run with:
    python main.py
    python -m journalquest
"""

import sys

from journalquest.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
