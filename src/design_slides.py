#!/usr/bin/env python3
"""
Script to design slides for a markdown deck or score a rendered presentation.
This is a thin wrapper around the slide_designer package.
"""

import sys
from slide_designer.cli import main

if __name__ == '__main__':
    sys.exit(main())
