"""
spacelint: brace and whitespace spacing checks for JavaScript.
"""

__version__ = "0.1.0"
