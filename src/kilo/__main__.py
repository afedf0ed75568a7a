"""Allow ``python -m kilo``."""

from kilo.cli.main import main

if __name__ == "__main__":
    main()
