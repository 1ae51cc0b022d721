"""
Entry point for running repodata_retention directly.

Usage:
    python -m repodata_retention [command] [options]

Commands:
    prune            Delete old metadata from a repository
    migrate          Copy retained old metadata into a new repodata directory
    blacklist        List files a retention strategy would exclude
    create-config    Create default configuration file
"""

import sys

from .cli import main

if __name__ == '__main__':
    sys.exit(main())
