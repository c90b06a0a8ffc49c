"""
Main entry point for running the package as a module.

Usage:
    python -m thumbnailer run job.json
    python -m thumbnailer validate job.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
