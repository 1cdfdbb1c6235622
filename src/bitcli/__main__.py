"""Allow running bitcli with ``python -m bitcli``."""

from bitcli.cli import main


if __name__ == "__main__":
    main()
