"""
Introspection backends locating declarations for the compiler.

- source: scans the Python files of a directory with ast, importing nothing
- runtime: reflects over an already imported class
"""

from .runtime import ClassDeclaration
from .source import SourceDeclaration, SourceScanner

__all__ = ["ClassDeclaration", "SourceDeclaration", "SourceScanner"]
