"""
projectmd - Plain text project management synced to an issue tracker.

Tasks live in markdown files with YAML front matter; `projectmd sync`
pushes changed tasks, one way, to GitHub Issues.
"""

__version__ = "0.1.0"
