#!/usr/bin/env python3
"""
Main entry point for the ceo_finder package.
"""


import traceback, sys
from multiprocessing import freeze_support
from ceo_finder.cli import main

if __name__ == '__main__':
    freeze_support()
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted by user\n")
        sys.exit(130)
    except Exception:
        traceback.print_exc()
        sys.exit(1)
