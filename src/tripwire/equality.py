"""Structural (deep) equality with cycle detection."""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import math
import re
import types
from collections.abc import Mapping, Sequence, Set
from typing import Any

logger = logging.getLogger(__name__)

_NUMBER_TYPES = (int, float)
_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)
_IDENTITY_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.LambdaType,
)
_TEMPORAL_TYPES = (dt.datetime, dt.date, dt.time, dt.timedelta)


def _primitive_category(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, _NUMBER_TYPES):
        return "number"
    if isinstance(value, complex):
        return "complex"
    if isinstance(value, str):
        return "str"
    return "bytes"


def _category(value: Any) -> str:
    if isinstance(value, _IDENTITY_TYPES):
        return "identity"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, Set):
        return "set"
    if isinstance(value, (Sequence, bytearray)) and not isinstance(value, (str, bytes)):
        return "sequence"
    if isinstance(value, _TEMPORAL_TYPES):
        return "temporal"
    if isinstance(value, re.Pattern):
        return "pattern"
    if isinstance(value, BaseException):
        return "exception"
    if dataclasses.is_dataclass(value):
        return "dataclass"
    if hasattr(value, "__dict__") and type(value).__eq__ is object.__eq__:
        return "object"
    return "other"


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _safe_eq(a: Any, b: Any) -> bool:
    try:
        return bool(a == b)
    except Exception:
        return False


def _to_number(value: str) -> float | None:
    try:
        return float(value.strip())
    except ValueError:
        return None


class _DeepComparer:
    """One comparison run; holds the pairs currently being compared."""

    def __init__(self, strict: bool) -> None:
        self.strict = strict
        self._visiting: list[tuple[int, int]] = []

    def equal(self, a: Any, b: Any) -> bool:
        if a is b:
            return True

        a_primitive = isinstance(a, _PRIMITIVE_TYPES)
        b_primitive = isinstance(b, _PRIMITIVE_TYPES)
        if a_primitive and b_primitive:
            return self._primitive_equal(a, b)
        if a_primitive or b_primitive:
            return False if self.strict else _safe_eq(a, b)

        if self.strict and type(a) is not type(b):
            return False
        category = _category(a)
        if category != _category(b):
            return False

        pair = (id(a), id(b))
        if pair in self._visiting:
            return True
        self._visiting.append(pair)
        try:
            return self._container_equal(category, a, b)
        finally:
            self._visiting.pop()

    def _primitive_equal(self, a: Any, b: Any) -> bool:
        if _is_nan(a) and _is_nan(b):
            return True
        if self.strict:
            return _primitive_category(a) == _primitive_category(b) and a == b
        if a == b:
            return True

        # Loose mode: numeric strings match the number they spell
        if isinstance(a, str) and isinstance(b, _NUMBER_TYPES) and not isinstance(b, bool):
            a, b = b, a
        if isinstance(a, _NUMBER_TYPES) and not isinstance(a, bool) and isinstance(b, str):
            number = _to_number(b)
            return number is not None and (number == a or (_is_nan(number) and _is_nan(a)))
        return False

    def _container_equal(self, category: str, a: Any, b: Any) -> bool:
        if category == "identity":
            return False
        if category == "mapping":
            return self._mapping_equal(a, b)
        if category == "set":
            return self._unordered_equal(list(a), list(b))
        if category == "sequence":
            return len(a) == len(b) and all(self.equal(x, y) for x, y in zip(a, b))
        if category == "temporal":
            return _safe_eq(a, b)
        if category == "pattern":
            return a.pattern == b.pattern and a.flags == b.flags
        if category == "exception":
            return type(a) is type(b) and self.equal(a.args, b.args)
        if category == "dataclass":
            if type(a) is not type(b):
                return False
            return all(self.equal(getattr(a, f.name), getattr(b, f.name)) for f in dataclasses.fields(a))
        if category == "object":
            return type(a) is type(b) and self._mapping_equal(vars(a), vars(b))
        return _safe_eq(a, b)

    def _mapping_equal(self, a: Mapping, b: Mapping) -> bool:
        if len(a) != len(b):
            return False

        b_items = list(b.items())
        matched = [False] * len(b_items)
        b_index: dict[Any, int] = {}
        for idx, (key, _) in enumerate(b_items):
            try:
                b_index[key] = idx
            except TypeError:
                pass

        for key, value in a.items():
            # Fast path: the same key exists in b
            try:
                idx = b_index.get(key)
            except TypeError:
                idx = None
            if (
                idx is not None
                and not matched[idx]
                and self.equal(key, b_items[idx][0])
                and self.equal(value, b_items[idx][1])
            ):
                matched[idx] = True
                continue

            for idx, (b_key, b_value) in enumerate(b_items):
                if not matched[idx] and self.equal(key, b_key) and self.equal(value, b_value):
                    matched[idx] = True
                    break
            else:
                return False
        return True

    def _unordered_equal(self, a: list, b: list) -> bool:
        if len(a) != len(b):
            return False
        matched = [False] * len(b)
        for item in a:
            for idx, candidate in enumerate(b):
                if not matched[idx] and self.equal(item, candidate):
                    matched[idx] = True
                    break
            else:
                return False
        return True


def deep_equal(a: Any, b: Any, strict: bool = False) -> bool:
    """Compare two values structurally.

    Args:
        a: First value.
        b: Second value.
        strict: Require matching primitive categories and container types.
            Loose mode lets ``1`` match ``"1"`` and a list match a tuple.

    Returns:
        True when the values are deeply equal. Self-referential values are
        supported; a pair already under comparison is treated as equal.
    """
    try:
        return _DeepComparer(strict).equal(a, b)
    except Exception as exc:
        logger.debug("deep_equal gave up comparing %s and %s: %s", type(a).__name__, type(b).__name__, exc)
        return False


__all__ = ["deep_equal"]
