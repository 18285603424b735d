"""
tabterm - tabbed terminal reader for an ordered set of markdown pages.
"""

__version__ = "0.1.0"
