# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Utility functions used by the sine table generator."""

import warnings


class OverflowWarning(Warning):
    """A warning for integer overflows."""

    pass


class FrequencyRoundingWarning(Warning):
    """A warning for when the realized frequency differs from the requested one."""

    pass


def Q_max(Q_format: int) -> int:
    """Return the maximum value for a given Q format, i.e.
    ``(1 << Q_format) - 1``.
    """
    return int((1 << Q_format) - 1)


def int_n(val: float | int, bits: int) -> int:
    """Signed integer type of a given width.
    Integers in Python are larger than 64b, so checks the value is
    within the valid range. Fractions are truncated towards zero.
    This function overflows if val is outside the range of the type.
    """
    val = int(val)
    if -(1 << (bits - 1)) <= val <= Q_max(bits - 1):
        return val
    else:
        warnings.warn("Overflow occurred", OverflowWarning)
        return int(((val + (1 << (bits - 1))) % (1 << bits)) - (1 << (bits - 1)))


def int8(val: float | int) -> int:
    """8 bit integer type, see :func:`int_n`."""
    return int_n(val, 8)


def int16(val: float | int) -> int:
    """16 bit integer type, see :func:`int_n`."""
    return int_n(val, 16)


def int32(val: float | int) -> int:
    """32 bit integer type, see :func:`int_n`."""
    return int_n(val, 32)
