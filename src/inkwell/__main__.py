"""Allow ``python -m inkwell``."""
import sys

from inkwell.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
