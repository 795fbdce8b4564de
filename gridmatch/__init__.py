"""
gridmatch - Rule engine for a Connect-Four-style game played over rounds

This package provides the line-indexed board, the round configuration,
the player move contract and the match state machine that alternates a
human and an AI opponent through a series of levels.
"""

# Version number
__version__ = '0.1.0'
