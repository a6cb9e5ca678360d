#!/usr/bin/env python3
"""
duelsim - seeded one-on-one battle simulator

Thin wrapper around the CLI in duelsim.cli.

To run: python main.py [matchup.json] [--seed N] [--max-turns N] [--log-level LEVEL]
"""
import sys

from duelsim.cli import run

if __name__ == "__main__":
    sys.exit(run())
