#!/usr/bin/env python3
"""Run serp from a source checkout without installing it: ./main.py --pack photos/"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from serp.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
