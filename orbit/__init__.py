"""orbit-it: semantic-version releases for Node.js and Python projects."""

__version__ = "0.1.0"
