#!/usr/bin/env python3
"""
ABOUTME: Entry point for the envvar CLI
ABOUTME: Simple wrapper that imports and runs the modular CLI
"""

from envvar.cli import main

if __name__ == "__main__":
    main()
