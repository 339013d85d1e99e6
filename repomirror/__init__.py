"""
repomirror: local mirrors of hosted git repositories.

Keeps clones of remote repositories up to date and reads package
metadata (tags, manifest files, release dates) from them.
"""

__version__ = "1.0.0"
__author__ = "repomirror"
