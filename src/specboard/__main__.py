"""Allow ``python -m specboard``."""

from specboard.cli import cli_main

if __name__ == "__main__":
    cli_main()
