# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Sine table generator.

The table is built from one period of ``floor(rate / frequency)`` samples.
Because of that rounding the realized frequency is
``rate / floor(rate / frequency)``, so e.g. 440 Hz and 441 Hz at 44.1 kHz
both produce the same 100 sample period. The period always starts at
phase zero; ``skip`` and ``len``/``repeats`` then select a window of the
period repeated cyclically.
"""

import math
import warnings
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict

from sine_table.dsp import utils as utils
from sine_table.dsp.types import SampleType
from sine_table.errors import DegenerateWaveError, FrequencyExceedsRateError, Span
from sine_table.models.config import SineWaveConfig

# a period needs at least two samples to hold anything but zero
MIN_PERIOD = 2


class SineTable(BaseModel):
    """The generated table.

    Attributes
    ----------
    samples : np.ndarray
        Output samples, with the dtype of ``sample_type``.
    sample_type : SampleType
        Element type of the table.
    period : int
        Number of samples in one period of the wave.
    rate : int
        Sampling rate the table was generated for, in Hz.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    samples: np.ndarray
    sample_type: SampleType
    period: int
    rate: int

    @property
    def count(self) -> int:
        """Number of samples, used to size the destination array."""
        return len(self.samples)

    @property
    def realized_frequency(self) -> float:
        """The frequency actually encoded by the table, in Hz."""
        return self.rate / self.period

    def tolist(self) -> list[int]:
        return [int(x) for x in self.samples]


def period_length(frequency: int, rate: int) -> int:
    """Return the number of samples in one period, ``floor(rate / frequency)``."""
    return rate // frequency


def sine_period(n: int, sample_type: SampleType) -> np.ndarray:
    """
    Generate one period of a sine wave, scaled to the full range of the
    sample type and truncated towards zero.

    Parameters
    ----------
    n : int
        Number of samples in the period.
    sample_type : SampleType
        The integer type to scale and cast to.

    Returns
    -------
    np.ndarray
        ``n`` samples starting at phase zero.
    """
    multiplier = math.pi * 2.0 / n
    amplitude = sample_type.max
    samples = [sample_type.cast(math.sin(i * multiplier) * amplitude) for i in range(n)]
    return np.array(samples, dtype=sample_type.dtype)


def cyclic_take(period: np.ndarray, skip: int, count: int) -> np.ndarray:
    """Treat ``period`` as repeating forever, skip ``skip`` samples and
    return the next ``count``.
    """
    idx = (np.arange(count, dtype=np.uint64) + np.uint64(skip % len(period))) % np.uint64(
        len(period)
    )
    return period[idx]


def output_count(config: SineWaveConfig, period: int) -> int:
    """Return the number of output samples for a configuration."""
    if config.length is not None:
        return config.length
    repeats = config.repeats if config.repeats is not None else 1
    return period * repeats


def _blame(config: SineWaveConfig) -> tuple[str, Optional[Span]]:
    # report against the field the user actually wrote
    field = "frequency" if config.supplied("frequency") or not config.supplied("rate") else "rate"
    return field, config.span(field)


def generate(config: SineWaveConfig) -> SineTable:
    """
    Generate the sine table described by a configuration.

    Parameters
    ----------
    config : SineWaveConfig
        Validated generation parameters.

    Returns
    -------
    SineTable
        The samples and their count.

    Raises
    ------
    FrequencyExceedsRateError
        If the period would be shorter than two samples.
    DegenerateWaveError
        If every sample of the period rounds to zero.
    """
    frequency = config.frequency
    rate = config.rate
    n = period_length(frequency, rate)
    if frequency > rate or n < MIN_PERIOD:
        field, span = _blame(config)
        raise FrequencyExceedsRateError(
            f"`frequency` of {frequency} Hz is too high for `rate` of {rate} Hz, "
            f"a period must be at least {MIN_PERIOD} samples long",
            field=field,
            span=span,
        )

    period = sine_period(n, config.sample_type)
    if not np.any(period):
        field, span = _blame(config)
        raise DegenerateWaveError(
            f"could not generate sine wave for `rate` of {rate} Hz "
            f"and `frequency` of {frequency} Hz",
            field=field,
            span=span,
        )

    # only for a frequency or rate the user wrote
    if rate % frequency and (config.supplied("frequency") or config.supplied("rate")):
        warnings.warn(
            f"requested {frequency} Hz, table period of {n} samples "
            f"gives {rate / n:g} Hz at {rate} Hz",
            utils.FrequencyRoundingWarning,
            stacklevel=2,
        )

    count = output_count(config, n)
    samples = cyclic_take(period, config.skip, count)
    return SineTable(samples=samples, sample_type=config.sample_type, period=n, rate=rate)
