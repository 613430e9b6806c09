"""Package entry point.

Allows running the command line front end via:

    python -m src.srs

This simply forwards execution to src.srs.cli.main().
"""

from src.srs.cli import main

if __name__ == "__main__":
    main()
