#!/usr/bin/env python3
"""Serve the generated static site locally for preview. Same as 'sc serve'."""

import sys

from showcalendar.cli import main

if __name__ == "__main__":
    main(["serve", *sys.argv[1:]])
