"""Allow running Thandie with ``python -m thandie``."""

import sys

from thandie.cli import main

if __name__ == "__main__":
	sys.exit(main())
