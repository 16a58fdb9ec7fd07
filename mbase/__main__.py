"""Package entry point for ``python -m mbase``.

WHY: Lets users run the toolkit without installing the console script,
e.g. ``python -m mbase detect -i SGVsbG8``.

HOW: Delegates straight to the CLI's main() function.

RULES:
- This file must exist for ``python -m mbase`` to work
- No argument handling here; cli.main() owns argv
"""

from mbase.cli import main

if __name__ == "__main__":
    main()
