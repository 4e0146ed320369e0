import sys

from sheetcalc._cli import main

if __name__ == "__main__":
    sys.exit(main())
