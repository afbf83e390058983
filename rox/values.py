"""Runtime values for Rox.

Rox has four kinds of value and they map directly onto Python scalars:

=========  ==============
Rox        Python
=========  ==============
nil        ``None``
Boolean    ``bool``
Number     ``float``
String     ``str``
=========  ==============

Every number is a double, so number literals are always stored as
``float``. The helpers here implement the language rules that differ from
Python's own: truthiness, cross-type equality and textual rendering.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Union

Value = Union[None, bool, float, str]


def type_name(value: Value) -> str:
    if value is None:
        return 'Nil'
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    raise TypeError(f"not a Rox value: {value!r}")


def is_truthy(value: Value) -> bool:
    # nil and false are the only falsy values; 0 and "" are truthy
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(left: Value, right: Value) -> bool:
    """Structural equality over tagged values.

    Values of different kinds are never equal. This matters because
    Python considers ``True == 1.0``.
    """
    if type(left) is not type(right):
        return False
    return left == right


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return str(int(value))
    # shortest round-trip digits, never in exponent form
    text = repr(value)
    if 'e' in text:
        text = format(Decimal(text), 'f')
    return text


def stringify(value: Value) -> str:
    """Canonical text of a value, as written by ``print``."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    return value
