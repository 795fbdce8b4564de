"""
gridmatch.ai - AI opponents for gridmatch

Only the call contract of an opponent matters to the match; this package
holds the reference implementation used when no factory is injected.
"""

from gridmatch.ai.random_agent import RandomAIFactory, create_random_ai

__all__ = ['RandomAIFactory', 'create_random_ai']
