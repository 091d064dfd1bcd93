# fsmgen/core/ordering.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
The single deterministic ordering used wherever states or events are enumerated
for output: plain lexicographic order of their names.
"""

from typing import Iterable, List, Mapping, TypeVar

V = TypeVar("V")


def ordered_names(names: Iterable[str]) -> List[str]:
    """Return the names sorted lexicographically."""
    return sorted(names)


def ordered_items(mapping: Mapping[str, V]) -> List[tuple]:
    """Return ``(name, value)`` pairs of a mapping sorted by name."""
    return [(name, mapping[name]) for name in ordered_names(mapping)]
