"""Package entry point for ``python -m f4merge``.

WHY: Users run ``python -m f4merge merge ...`` or ``python -m f4merge
split ...`` without installing the console script.

HOW: Delegates to the CLI's main() and exits with its return code.
"""

import sys

if __name__ == "__main__":
    from f4merge.cli import main
    sys.exit(main())
