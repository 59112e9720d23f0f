"""
Off-days tracker: which interns and residents are off on a given date.
"""

__version__ = "0.1.0"
