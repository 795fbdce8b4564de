"""
gridmatch.interfaces - User interfaces for gridmatch

Currently a terminal front end that drives the human side of a match.
"""

# Don't import anything here to avoid circular imports
__all__ = []
