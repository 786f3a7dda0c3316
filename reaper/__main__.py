#!/usr/bin/env python3
"""
Entry point for running as module: python -m reaper
"""

from reaper.cli import cli


if __name__ == "__main__":
    cli()
