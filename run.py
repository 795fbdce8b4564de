#!/usr/bin/env python3
"""
run.py - Main entry point for the gridmatch command line
"""

import os
import sys

# Add the project root to Python path so the package imports without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from gridmatch.interfaces.cli import main


if __name__ == "__main__":
    sys.exit(main())
