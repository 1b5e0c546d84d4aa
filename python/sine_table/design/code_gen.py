# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Generate C sources holding sine tables."""

from pathlib import Path
from types import SimpleNamespace
from typing import Optional

from mako.template import Template

import sine_table
from sine_table.design.parse_config import Binding, SineWaveDeclaration
from sine_table.dsp.signal_gen import SineTable, generate
from sine_table.errors import DeclarationSyntaxError

THIS_DIR = Path(__file__).parent
HEADER_TEMPLATE = Template(filename=str(THIS_DIR / "code_gen/sine_table.mako"))

VALUES_PER_LINE = 12

# public tables are only defined where this is set, other includes see an extern
IMPLEMENTATION_MACRO = "SINE_TABLE_IMPLEMENTATION"


def _c_lines(table: SineTable, per_line: int = VALUES_PER_LINE) -> list[str]:
    literals = [table.sample_type.literal(v) for v in table.tolist()]
    return [
        ", ".join(literals[i : i + per_line]) + ","
        for i in range(0, len(literals), per_line)
    ]


def _c_qualifiers(decl: SineWaveDeclaration) -> list[str]:
    """Map a binding to C. Non-public tables get internal linkage, and
    everything except ``static mut`` is read only.
    """
    qualifiers = []
    if not decl.public:
        qualifiers.append("static")
    if not decl.mutable:
        qualifiers.append("const")
    return qualifiers


def _comment(decl: SineWaveDeclaration, table: SineTable) -> str:
    config = decl.config
    return (
        f"{decl.name}: {config.frequency} Hz requested at {config.rate} Hz, "
        f"{table.period} samples per period ({table.realized_frequency:g} Hz), "
        f"{table.count} samples"
    )


def c_initializer(table: SineTable) -> str:
    """Render a table as a C brace initializer, for use inline."""
    return "{" + ", ".join(table.sample_type.literal(v) for v in table.tolist()) + "}"


def c_declaration_head(decl: SineWaveDeclaration, table: SineTable) -> str:
    """Render the part of a C array definition before the ``=``, e.g.
    ``static const int16_t BEEP[100]``.
    """
    if decl.binding == Binding.LOCAL:
        raise DeclarationSyntaxError(
            "an inline sine wave has no name to declare", span=decl.span
        )
    words = _c_qualifiers(decl) + [table.sample_type.c_type, f"{decl.name}[{table.count}]"]
    return " ".join(words)


def c_declaration(decl: SineWaveDeclaration, table: Optional[SineTable] = None) -> str:
    """Render a complete C array definition for a named declaration."""
    table = table or generate(decl.config)
    return f"{c_declaration_head(decl, table)} = {c_initializer(table)};"


def generate_header(
    declarations: list[SineWaveDeclaration], out_path: Optional[Path] = None
) -> str:
    """
    Generate a C header defining every declared table.

    Private tables are defined with internal linkage. Public tables are
    declared ``extern``, and defined only when ``SINE_TABLE_IMPLEMENTATION``
    is set, so exactly one source file should define it before including
    the header.

    Parameters
    ----------
    declarations : list[SineWaveDeclaration]
        Named declarations, in output order.
    out_path : Path, optional
        If given, the header is also written to this file.

    Returns
    -------
    str
        The header text.
    """
    tables = []
    for decl in declarations:
        table = generate(decl.config)
        tables.append(
            SimpleNamespace(
                comment=_comment(decl, table),
                head=c_declaration_head(decl, table),
                lines=_c_lines(table),
                public=decl.public,
            )
        )
    text = HEADER_TEMPLATE.render(
        version=sine_table.__version__, tables=tables, impl_macro=IMPLEMENTATION_MACRO
    )
    if out_path is not None:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text)
    return text
