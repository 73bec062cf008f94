"""
Core error types
"""


class InsufficientDataError(ValueError):
    """Not enough usable data to classify a symbol or extract guidance"""
