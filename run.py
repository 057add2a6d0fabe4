# -*- coding: utf-8 -*-

"""
Main entry point for running the review toolkit from a source checkout.
"""

import sys

from review_toolkit.cli import main

if __name__ == '__main__':
    sys.exit(main())
