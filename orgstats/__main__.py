"""Allow running via `python -m orgstats`"""

import sys

from orgstats.cli import main

sys.exit(main())
