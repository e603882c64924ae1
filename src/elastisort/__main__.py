"""Run the sort document CLI with ``python -m elastisort``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
