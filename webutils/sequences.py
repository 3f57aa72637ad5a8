"""
Generic helpers for sequences and optional values.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Hashable, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")


class UnhashableElementError(TypeError):
    """Raised by unique_of when an element cannot be used as a set key."""

    def __init__(self, element: Any, index: int):
        self.element = element
        self.index = index
        super().__init__(
            f"unhashable element of type {type(element).__name__!r} at index {index}"
        )


def _key(value: Any) -> Hashable:
    # 1, 1.0 and True compare equal in Python but are different values here
    return (type(value), value)


def unique_of(items: Iterable[T]) -> List[T]:
    """
    Return the distinct values of ``items`` in order of first occurrence.

    Values are compared by type and value. Raises UnhashableElementError
    for elements such as lists or dicts.
    """
    seen: set = set()
    result: List[T] = []
    for index, value in enumerate(items):
        key = _key(value)
        try:
            if key in seen:
                continue
            seen.add(key)
        except TypeError as exc:
            raise UnhashableElementError(value, index) from exc
        result.append(value)
    return result


def value_of(ref: Optional[T], default: Union[Callable[[], T], T]) -> T:
    """
    Return a copy of ``ref``, or the default value when ``ref`` is None.

    ``default`` is either a type/factory called with no arguments
    (``int`` -> ``0``, ``str`` -> ``""``) or the default value itself.
    Objects that cannot be copied are returned unchanged.
    """
    if ref is None:
        return default() if callable(default) else default
    try:
        return copy.copy(ref)
    except (TypeError, copy.Error):
        # locks, generators, open files: no copy semantics, hand back as is
        return ref
