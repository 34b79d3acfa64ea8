#!/usr/bin/env python3
"""python -m secscan"""

import sys

from secscan.cli import main

sys.exit(main())
