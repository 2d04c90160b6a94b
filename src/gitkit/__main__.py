#!/usr/bin/env python3
"""
git-kit CLI entry point.
Allows running with `python -m gitkit`
"""

from .cli.main import main

if __name__ == "__main__":
    main()
