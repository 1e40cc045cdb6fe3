"""
Allow running SOLWALLET as a module: python -m solwallet
"""

import sys

from solwallet.cli import main

if __name__ == "__main__":
    sys.exit(main())
