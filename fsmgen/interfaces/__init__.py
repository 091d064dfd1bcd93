"""
Interfaces between the compiler core and its introspection backends.
"""

from .protocols import Declaration, Renderer

__all__ = ["Declaration", "Renderer"]
