from __future__ import annotations

import operator as _operator
import re
from typing import Any

from wajs.core.errors import ValidationError

_OPERATORS = {
    ">": _operator.gt,
    ">=": _operator.ge,
    "<": _operator.lt,
    "<=": _operator.le,
    "=": _operator.eq,
}

_BETA_SUFFIX = re.compile(r"-beta$")


def compare_wweb_versions(left: Any, op: str, right: Any) -> bool:
    """Compares two WhatsApp Web version strings such as ``2.2335.6``.

    ``-beta`` suffixes are ignored and the shorter operand is right-padded with
    zeros before the dotted digits are compared as one number.
    """
    if op not in _OPERATORS:
        raise ValidationError("Invalid comparison operator is provided")
    if not isinstance(left, str) or not isinstance(right, str):
        raise ValidationError("A non-string WWeb version type is provided")

    left = _BETA_SUFFIX.sub("", left)
    right = _BETA_SUFFIX.sub("", right)
    width = max(len(left), len(right))
    left = left.ljust(width, "0")
    right = right.ljust(width, "0")

    try:
        left_value = int(left.replace(".", ""))
        right_value = int(right.replace(".", ""))
    except ValueError as exc:
        raise ValidationError(f"Invalid WWeb version: {exc}") from exc
    return _OPERATORS[op](left_value, right_value)
