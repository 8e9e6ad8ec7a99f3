"""Allow running as: python -m ainimo.interface"""

import sys

from .cli import main

sys.exit(main())
