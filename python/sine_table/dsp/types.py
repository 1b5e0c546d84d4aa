# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Output sample types supported by the generator."""

from enum import Enum

import numpy as np

import sine_table.dsp.utils as utils


class SampleType(Enum):
    """Signed integer type of the generated samples.

    The value is the identifier used for the ``type`` field. Each member
    knows its width, the largest magnitude a sample may take, and how
    to cast and emit a sample of that type.
    """

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"

    @classmethod
    def from_ident(cls, ident: str) -> "SampleType":
        """Look up a sample type from its identifier, e.g. ``"i16"``."""
        return cls(ident)

    @classmethod
    def idents(cls) -> list[str]:
        """All accepted identifiers, in width order."""
        return [t.value for t in cls]

    @property
    def bits(self) -> int:
        return _BITS[self]

    @property
    def max(self) -> int:
        """Largest sample magnitude, ``2**(bits - 1) - 1``. The most
        negative value of the type is never produced.
        """
        return utils.Q_max(self.bits - 1)

    @property
    def dtype(self):
        return _DTYPES[self]

    @property
    def c_type(self) -> str:
        return f"int{self.bits}_t"

    def cast(self, value: float | int) -> int:
        """Truncate towards zero and wrap to the width of this type."""
        return _CASTS[self](value)

    def literal(self, value: int) -> str:
        """Format a sample as a C integer literal."""
        return str(self.cast(value))

    def __str__(self):
        return self.value


_BITS = {
    SampleType.I8: 8,
    SampleType.I16: 16,
    SampleType.I32: 32,
}

_DTYPES = {
    SampleType.I8: np.int8,
    SampleType.I16: np.int16,
    SampleType.I32: np.int32,
}

_CASTS = {
    SampleType.I8: utils.int8,
    SampleType.I16: utils.int16,
    SampleType.I32: utils.int32,
}

DEFAULT_SAMPLE_TYPE = SampleType.I16
