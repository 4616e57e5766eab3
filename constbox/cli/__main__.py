#!/usr/bin/env python3
"""Entry point for constbox CLI when run as python -m constbox.cli."""

if __name__ == "__main__":
    from constbox.cli.main import main

    main()
