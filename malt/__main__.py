import sys

from malt.repl import main

if __name__ == "__main__":
    sys.exit(main())
