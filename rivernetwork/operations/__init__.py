"""
Network operations that build, edit or renumber river networks.
"""

__all__ = []
