"""
CLI entry point for the Text Replace tool.

This allows the tool to be run as:
    python -m tools.replace --file myfile.py --old 'x = 1' --new 'x = 2'
"""

import sys
from .replacer import main

if __name__ == "__main__":
    sys.exit(main())
