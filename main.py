#!/usr/bin/env python3
"""Run the scheduler on one instance file: ``python main.py [--config config.yaml] <instance>``."""

import sys

from tardysched.main import main

if __name__ == "__main__":
    sys.exit(main())
