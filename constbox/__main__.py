"""Entry point for ``python -m constbox``."""

from constbox.cli.main import main

if __name__ == "__main__":
    main()
