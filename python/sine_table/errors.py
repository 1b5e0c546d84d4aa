# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Diagnostics raised while parsing or generating a sine table.

Every error carries the name of the field that caused it, and the source
position of that field when the configuration was parsed from text.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Span(BaseModel):
    """Position of a token in the parsed source. Lines and columns count from 1."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    offset: int = 0

    def __str__(self):
        return f"line {self.line}, column {self.column}"


class SineWaveError(Exception):
    """Base class of all sine table diagnostics.

    Parameters
    ----------
    message : str
        Human readable description of the problem.
    field : str, optional
        The field responsible, as written by the user (e.g. ``len``).
    span : Span, optional
        Where in the source the offending token starts.
    """

    def __init__(self, message: str, field: Optional[str] = None, span: Optional[Span] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.span = span

    def __str__(self):
        if self.span is None:
            return self.message
        return f"{self.span}: {self.message}"


class DeclarationSyntaxError(SineWaveError):
    """The source text does not follow the declaration grammar."""


class UnknownFieldError(SineWaveError):
    """An unrecognised field name was given."""


class DuplicateFieldError(SineWaveError):
    """A field was given more than once."""


class InvalidLiteralError(SineWaveError):
    """A value is not a valid literal for its field or is out of range."""


class NonPositiveValueError(SineWaveError):
    """A field that must be strictly positive is zero or negative."""


class NegativeSkipError(SineWaveError):
    """``skip`` was negative."""


class ConflictingLenRepeatsError(SineWaveError):
    """Both ``len`` and ``repeats`` were given."""


class FrequencyExceedsRateError(SineWaveError):
    """The frequency is too high for the sampling rate."""


class DegenerateWaveError(SineWaveError):
    """Every sample of the computed period is zero."""


class MissingRequiredFieldError(SineWaveError):
    """A field without a default was not given."""
