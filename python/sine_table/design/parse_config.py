# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Functions to convert sine table declarations to validated configurations.

A declaration is either a bare list of fields::

    frequency: 440, rate: 48_000, type: i8

or a named binding, several of which may be separated by ``;``::

    pub const BEEP = sine_wave(frequency: 440, rate: 48_000);
    static mut SCRATCH = sine_wave(frequency: 100, repeats: 4);

Fields are checked in the order they are written, so a diagnostic always
points at the field that introduced the problem.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from sine_table.dsp.types import SampleType
from sine_table.errors import (
    ConflictingLenRepeatsError,
    DeclarationSyntaxError,
    DuplicateFieldError,
    FrequencyExceedsRateError,
    InvalidLiteralError,
    MissingRequiredFieldError,
    NegativeSkipError,
    NonPositiveValueError,
    Span,
    UnknownFieldError,
)
from sine_table.models.config import (
    DEFAULT_FREQUENCY,
    DEFAULT_RATE,
    FIELD_NAMES,
    U32_LIMIT,
    U64_LIMIT,
    SineWaveConfig,
)

GENERATOR_NAME = "sine_wave"

_EXCLUSIVE = {"len": "repeats", "repeats": "len"}

_INT_RE = re.compile(
    r"-?(0[xX]_*[0-9a-fA-F][0-9a-fA-F_]*|0[oO]_*[0-7][0-7_]*|0[bB]_*[01][01_]*|[0-9][0-9_]*)"
)

_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
    |(?P<space>[ \t\r]+)
    |(?P<comment>//[^\n]*)
    |(?P<int>-?[0-9][0-9A-Za-z_]*)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<punct>[:,;=()])
    """,
    re.VERBOSE,
)


class Binding(Enum):
    """How a generated table is bound in the surrounding program."""

    LOCAL = "local"
    CONST = "const"
    STATIC = "static"


class FieldEntry(BaseModel):
    """One ``name: value`` pair, before validation.

    ``value`` is the literal text when parsed from source, or an already
    typed Python value (``int``, ``str`` or ``SampleType``) from other
    front ends.
    """

    name: str
    value: Any
    name_span: Optional[Span] = None
    value_span: Optional[Span] = None


class SineWaveDeclaration(BaseModel):
    """A parsed declaration: the binding shape plus its configuration."""

    model_config = ConfigDict(frozen=True)

    binding: Binding = Binding.LOCAL
    name: Optional[str] = None
    public: bool = False
    mutable: bool = False
    config: SineWaveConfig
    span: Optional[Span] = None


class Token(BaseModel):
    kind: str
    text: str
    span: Span


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens, ending with an ``eof`` token."""
    tokens = []
    pos = 0
    line = 1
    line_start = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        span = Span(line=line, column=pos - line_start + 1, offset=pos)
        if match is None:
            raise DeclarationSyntaxError(f"unexpected character `{source[pos]}`", span=span)
        kind = match.lastgroup
        if kind == "newline":
            line += 1
            line_start = match.end()
        elif kind not in ("space", "comment"):
            tokens.append(Token(kind=kind, text=match.group(), span=span))
        pos = match.end()
    tokens.append(
        Token(kind="eof", text="", span=Span(line=line, column=pos - line_start + 1, offset=pos))
    )
    return tokens


def _format_names(names: list[str]) -> str:
    quoted = [f"`{n}`" for n in names]
    if len(quoted) == 1:
        return quoted[0]
    return ", ".join(quoted[:-1]) + " and " + quoted[-1]


def _parse_int(entry: FieldEntry) -> int:
    value = entry.value
    if isinstance(value, bool):
        pass
    elif isinstance(value, int):
        return value
    elif isinstance(value, str) and _INT_RE.fullmatch(value):
        negative = value.startswith("-")
        digits = value.lstrip("-").replace("_", "")
        if digits[:2].lower() in ("0x", "0o", "0b"):
            number = int(digits, 0)
        else:
            number = int(digits, 10)
        return -number if negative else number
    raise InvalidLiteralError(
        f"expected integer literal for `{entry.name}`, found `{value}`",
        field=entry.name,
        span=entry.value_span,
    )


def _parse_positive(entry: FieldEntry, limit: int) -> int:
    value = _parse_int(entry)
    if value <= 0:
        raise NonPositiveValueError(
            f"`{entry.name}` must be positive, found {value}",
            field=entry.name,
            span=entry.value_span,
        )
    if value >= limit:
        raise InvalidLiteralError(
            f"`{entry.name}` of {value} is too large, the maximum is {limit - 1}",
            field=entry.name,
            span=entry.value_span,
        )
    return value


def _parse_u32(entry: FieldEntry) -> int:
    return _parse_positive(entry, U32_LIMIT)


def _parse_u64(entry: FieldEntry) -> int:
    return _parse_positive(entry, U64_LIMIT)


def _parse_skip(entry: FieldEntry) -> int:
    value = _parse_int(entry)
    if value < 0:
        raise NegativeSkipError(
            f"`skip` must not be negative, found {value}",
            field=entry.name,
            span=entry.value_span,
        )
    if value >= U32_LIMIT:
        raise InvalidLiteralError(
            f"`skip` of {value} is too large, the maximum is {U32_LIMIT - 1}",
            field=entry.name,
            span=entry.value_span,
        )
    return value


def _parse_type(entry: FieldEntry) -> SampleType:
    if isinstance(entry.value, SampleType):
        return entry.value
    if isinstance(entry.value, str) and entry.value in SampleType.idents():
        return SampleType.from_ident(entry.value)
    raise InvalidLiteralError(
        f"invalid value for `type`, must be one of {_format_names(SampleType.idents())}",
        field=entry.name,
        span=entry.value_span,
    )


_FIELD_PARSERS = {
    "frequency": _parse_u32,
    "rate": _parse_u32,
    "len": _parse_u64,
    "repeats": _parse_u64,
    "skip": _parse_skip,
    "type": _parse_type,
}


def _check_known(entry: FieldEntry, seen: dict[str, FieldEntry]):
    if entry.name in _FIELD_PARSERS:
        return
    available = [
        n for n in FIELD_NAMES if n not in seen and _EXCLUSIVE.get(n) not in seen
    ]
    if available:
        message = f"invalid field `{entry.name}`, must be one of {_format_names(available)}"
    else:
        message = f"invalid field `{entry.name}`, all fields are already defined"
    raise UnknownFieldError(message, field=entry.name, span=entry.name_span)


def _check_exclusive(entry: FieldEntry, seen: dict[str, FieldEntry]):
    if _EXCLUSIVE.get(entry.name) in seen:
        raise ConflictingLenRepeatsError(
            "cannot define both `len` and `repeats`", field=entry.name, span=entry.name_span
        )


def _check_unique(entry: FieldEntry, seen: dict[str, FieldEntry]):
    if entry.name in seen:
        raise DuplicateFieldError(
            f"`{entry.name}` defined twice", field=entry.name, span=entry.name_span
        )


def _check_frequency_rate(entry: FieldEntry, values: dict[str, Any]):
    if entry.name == "frequency" and "rate" in values and values["frequency"] > values["rate"]:
        raise FrequencyExceedsRateError(
            f"`frequency` must not exceed `rate`, which is {values['rate']} Hz",
            field="frequency",
            span=entry.value_span,
        )
    if entry.name == "rate" and "frequency" in values and values["frequency"] > values["rate"]:
        raise FrequencyExceedsRateError(
            f"`rate` must not be less than `frequency`, which is {values['frequency']} Hz",
            field="rate",
            span=entry.value_span,
        )


def _check_defaults(
    seen: dict[str, FieldEntry],
    values: dict[str, Any],
    require_frequency: bool,
    end_span: Optional[Span],
):
    if "frequency" not in values:
        if require_frequency:
            raise MissingRequiredFieldError(
                "`frequency` must be defined", field="frequency", span=end_span
            )
        if "rate" in values and values["rate"] < DEFAULT_FREQUENCY:
            raise FrequencyExceedsRateError(
                f"`rate` must not be less than the default `frequency`, "
                f"which is {DEFAULT_FREQUENCY} Hz",
                field="rate",
                span=seen["rate"].value_span,
            )
    elif "rate" not in values and values["frequency"] > DEFAULT_RATE:
        raise FrequencyExceedsRateError(
            f"`frequency` must not exceed the default `rate`, which is {DEFAULT_RATE} Hz",
            field="frequency",
            span=seen["frequency"].value_span,
        )


def _as_entry(entry: Union[FieldEntry, tuple]) -> FieldEntry:
    if isinstance(entry, FieldEntry):
        return entry
    name, value = entry
    return FieldEntry(name=name, value=value)


def parse_fields(
    entries: Iterable[Union[FieldEntry, tuple[str, Any]]],
    require_frequency: bool = False,
    end_span: Optional[Span] = None,
) -> SineWaveConfig:
    """
    Validate an ordered list of fields and build the configuration.

    Parameters
    ----------
    entries : iterable of FieldEntry or (name, value) tuples
        The fields in the order they were written.
    require_frequency : bool, optional
        If True, ``frequency`` has no default and must be given.
    end_span : Span, optional
        Where to report fields that are missing altogether.

    Returns
    -------
    SineWaveConfig
        The configuration with defaults applied.

    Raises
    ------
    SineWaveError
        The subclass matching the first rule that was broken.
    """
    seen: dict[str, FieldEntry] = {}
    values: dict[str, Any] = {}
    for entry in entries:
        entry = _as_entry(entry)
        _check_known(entry, seen)
        _check_exclusive(entry, seen)
        _check_unique(entry, seen)
        values[entry.name] = _FIELD_PARSERS[entry.name](entry)
        _check_frequency_rate(entry, values)
        seen[entry.name] = entry
    _check_defaults(seen, values, require_frequency, end_span)

    config = SineWaveConfig(**values)
    return config.with_spans(
        {name: e.value_span for name, e in seen.items() if e.value_span is not None}
    )


class _Parser:
    """Recursive descent parser over the token list."""

    def __init__(self, source: str, require_frequency: bool):
        self.tokens = tokenize(source)
        self.pos = 0
        self.require_frequency = require_frequency

    def peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def at(self, kind: str, text: Optional[str] = None, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.kind == kind and (text is None or token.text == text)

    def next(self) -> Token:
        token = self.peek()
        self.pos += 1
        return token

    def expect(self, kind: str, text: Optional[str] = None, what: Optional[str] = None) -> Token:
        if not self.at(kind, text):
            token = self.peek()
            found = "end of input" if token.kind == "eof" else f"`{token.text}`"
            raise DeclarationSyntaxError(
                f"expected {what or f'`{text}`'}, found {found}", span=token.span
            )
        return self.next()

    def fields(self, closing: tuple[tuple[str, Optional[str]], ...]) -> list[FieldEntry]:
        entries = []
        while not any(self.at(kind, text) for kind, text in closing):
            name = self.expect("ident", what="field name")
            self.expect("punct", ":")
            value = self.peek()
            if value.kind not in ("int", "ident"):
                self.expect("int", what="integer literal or identifier")
            self.next()
            entries.append(
                FieldEntry(
                    name=name.text, value=value.text, name_span=name.span, value_span=value.span
                )
            )
            if not self.at("punct", ","):
                break
            self.next()
        return entries

    def is_declaration(self) -> bool:
        if self.at("ident", "pub"):
            return self.at("ident", "const", 1) or self.at("ident", "static", 1)
        return (self.at("ident", "const") or self.at("ident", "static")) and not self.at(
            "punct", ":", 1
        )

    def local(self) -> SineWaveDeclaration:
        start = self.peek().span
        entries = self.fields((("punct", ";"), ("eof", None)))
        end = self.peek().span
        if not self.at("eof"):
            self.expect("punct", ";", what="`,`, `;` or end of input")
        config = parse_fields(entries, self.require_frequency, end_span=end)
        return SineWaveDeclaration(config=config, span=start)

    def declaration(self) -> SineWaveDeclaration:
        start = self.peek().span
        public = self.at("ident", "pub")
        if public:
            self.next()
        mutable = False
        if self.at("ident", "static"):
            self.next()
            binding = Binding.STATIC
            if self.at("ident", "mut"):
                self.next()
                mutable = True
        else:
            self.expect("ident", "const")
            binding = Binding.CONST
        name = self.expect("ident", what="a name")
        self.expect("punct", "=")
        generator = self.expect("ident", what=f"`{GENERATOR_NAME}`")
        if generator.text != GENERATOR_NAME:
            raise DeclarationSyntaxError(
                f"the identifier must be `{GENERATOR_NAME}`", span=generator.span
            )
        self.expect("punct", "(")
        entries = self.fields((("punct", ")"),))
        close = self.expect("punct", ")")
        config = parse_fields(entries, self.require_frequency, end_span=close.span)
        self.expect("punct", ";")
        return SineWaveDeclaration(
            binding=binding,
            name=name.text,
            public=public,
            mutable=mutable,
            config=config,
            span=start,
        )

    def source(self) -> list[SineWaveDeclaration]:
        declarations = []
        names = set()
        while not self.at("eof"):
            if self.is_declaration():
                decl = self.declaration()
                if decl.name in names:
                    raise DeclarationSyntaxError(
                        f"`{decl.name}` declared twice", span=decl.span
                    )
                names.add(decl.name)
            else:
                decl = self.local()
                if declarations or not self.at("eof"):
                    raise DeclarationSyntaxError(
                        "an inline sine wave cannot be combined with other declarations",
                        span=decl.span,
                    )
            declarations.append(decl)
        if not declarations:
            # an empty field list is a valid inline sine wave with all defaults
            declarations.append(self.local())
        return declarations


def parse_config(source: str, require_frequency: bool = False) -> SineWaveConfig:
    """Parse a bare field list such as ``"frequency: 440, rate: 16_000"``."""
    parser = _Parser(source, require_frequency)
    entries = parser.fields((("eof", None),))
    parser.expect("eof", what="`,` or end of input")
    return parse_fields(entries, require_frequency, end_span=parser.peek().span)


def parse_declarations(
    source: str, require_frequency: bool = False
) -> list[SineWaveDeclaration]:
    """Parse one or more ``;`` separated declarations."""
    return _Parser(source, require_frequency).source()


def parse_declaration(source: str, require_frequency: bool = False) -> SineWaveDeclaration:
    """Parse exactly one declaration, named or inline."""
    declarations = parse_declarations(source, require_frequency)
    if len(declarations) != 1:
        raise DeclarationSyntaxError(
            f"expected a single declaration, found {len(declarations)}",
            span=declarations[1].span,
        )
    return declarations[0]
