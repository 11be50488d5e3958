"""
Package entry point.

Allows running the application via:

    python -m teachload

This simply forwards execution to teachload.cli.main().
"""

from teachload.cli import main

if __name__ == "__main__":
    main()
