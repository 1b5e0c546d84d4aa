# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Pydantic model of a validated sine table configuration."""

from functools import partial
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from sine_table.dsp.types import DEFAULT_SAMPLE_TYPE, SampleType
from sine_table.errors import Span

DEFAULT_FREQUENCY = 440
DEFAULT_RATE = 44_100

U32_LIMIT = 1 << 32
U64_LIMIT = 1 << 64

FREQUENCY = partial(
    Field, default=DEFAULT_FREQUENCY, gt=0, lt=U32_LIMIT, description="Frequency of the wave in Hz."
)
RATE = partial(
    Field, default=DEFAULT_RATE, gt=0, lt=U32_LIMIT, description="Sampling rate in Hz."
)
LENGTH = partial(
    Field, default=None, gt=0, lt=U64_LIMIT, alias="len", description="Exact number of samples."
)
REPEATS = partial(
    Field, default=None, gt=0, lt=U64_LIMIT, description="Number of whole periods to emit."
)
SKIP = partial(
    Field, default=0, ge=0, lt=U32_LIMIT, description="Samples skipped before the first output."
)
SAMPLE_TYPE = partial(
    Field, default=DEFAULT_SAMPLE_TYPE, alias="type", description="Output sample type."
)

# names as written in the source, in declaration order
FIELD_NAMES = ("frequency", "rate", "len", "repeats", "skip", "type")


class SineWaveConfig(BaseModel):
    """Generation parameters of one sine table, with defaults applied.

    Fields may be given by their source names (``len``, ``type``) or by
    attribute name (``length``, ``sample_type``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    frequency: int = FREQUENCY()
    rate: int = RATE()
    sample_type: SampleType = SAMPLE_TYPE()
    length: Optional[int] = LENGTH()
    repeats: Optional[int] = REPEATS()
    skip: int = SKIP()

    _spans: dict[str, Span] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def check_consistency(self):
        """Check the cross-field rules that single field constraints cannot express."""
        if self.frequency > self.rate:
            raise ValueError(
                f"frequency ({self.frequency} Hz) must not exceed rate ({self.rate} Hz)"
            )
        if self.length is not None and self.repeats is not None:
            raise ValueError("cannot define both len and repeats")
        return self

    def supplied(self, name: str) -> bool:
        """Return True if the field was given explicitly rather than defaulted."""
        return _attr_name(name) in self.model_fields_set

    def span(self, name: str) -> Optional[Span]:
        """Source position of a field's value, if it was parsed from text."""
        return self._spans.get(name)

    def with_spans(self, spans: dict[str, Span]) -> "SineWaveConfig":
        """Attach source positions, keyed by source field name."""
        self._spans = dict(spans)
        return self


def _attr_name(name: str) -> str:
    return {"len": "length", "type": "sample_type"}.get(name, name)
