"""Application entry point."""

import sys

from skycast.cli import main

if __name__ == "__main__":
    sys.exit(main())
