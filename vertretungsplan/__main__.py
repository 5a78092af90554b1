"""
Package entry point.

Allows running the application via:

    python -m vertretungsplan

This simply forwards execution to vertretungsplan.cli.main().
"""

from vertretungsplan.cli import main

if __name__ == "__main__":
    main()
