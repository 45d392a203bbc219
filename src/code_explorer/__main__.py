import sys

from code_explorer.cli import main

if __name__ == "__main__":
    sys.exit(main())
