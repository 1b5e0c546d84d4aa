# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Command line front end, for generating sine table headers from a build."""

import argparse
import re
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from sine_table.design.code_gen import c_initializer, generate_header
from sine_table.design.parse_config import (
    Binding,
    SineWaveDeclaration,
    parse_declarations,
    parse_fields,
)
from sine_table.dsp.signal_gen import generate
from sine_table.errors import DeclarationSyntaxError, SineWaveError

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class TableEntry(BaseModel, extra="forbid"):
    """One table in a YAML config file."""

    binding: Literal["const", "static"] = "const"
    public: bool = False
    mutable: bool = False
    sine_wave: dict[str, Any] = Field(default_factory=dict, description="Generator fields.")

    @model_validator(mode="after")
    def check_mutable(self):
        """Only static tables can be mutable."""
        if self.mutable and self.binding != "static":
            raise ValueError("only `static` tables can be mutable")
        return self


class TablesFile(BaseModel, extra="forbid"):
    """Pydantic model of a YAML config file."""

    tables: dict[str, TableEntry]


def load_config_dir(config_dir: Path, require_frequency: bool = False) -> list[SineWaveDeclaration]:
    """Read every ``*.yaml`` file in a directory, in name order.

    Table names share one namespace across all the files. Field errors
    are raised again with the file and table name in the message.
    """
    declarations = []
    seen = {}
    for fl in sorted(Path(config_dir).glob("*.yaml")):
        with open(fl, "r") as fd:
            data = TablesFile.model_validate(yaml.safe_load(fd))
        for name, entry in data.tables.items():
            if not _NAME_RE.fullmatch(name):
                raise DeclarationSyntaxError(f"`{name}` in {fl.name} is not a valid name")
            if name in seen:
                raise DeclarationSyntaxError(
                    f"`{name}` declared twice, in {seen[name]} and {fl.name}"
                )
            seen[name] = fl.name
            try:
                config = parse_fields(list(entry.sine_wave.items()), require_frequency)
            except SineWaveError as e:
                raise type(e)(
                    f"{fl.name}: table `{name}`: {e.message}", field=e.field, span=e.span
                ) from e
            declarations.append(
                SineWaveDeclaration(
                    binding=Binding(entry.binding),
                    name=name,
                    public=entry.public,
                    mutable=entry.mutable,
                    config=config,
                )
            )
    return declarations


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sine-table", description="Generate signed integer sine wave tables"
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="declarations, e.g. 'const BEEP = sine_wave(frequency: 440);', "
        "or a bare field list for an inline initializer",
    )
    parser.add_argument("--file", "-f", type=Path, help="read declarations from a file")
    parser.add_argument("--config-dir", "-c", type=Path, help="directory of yaml table configs")
    parser.add_argument("--out", "-o", type=Path, help="output header, stdout if omitted")
    parser.add_argument(
        "--require-frequency",
        action="store_true",
        help="do not default `frequency` to 440 Hz",
    )
    args = parser.parse_args(argv)
    if sum(x is not None for x in (args.source, args.file, args.config_dir)) != 1:
        parser.error("give exactly one of SOURCE, --file or --config-dir")
    return args


def run(args) -> str:
    """Generate the output text for parsed arguments."""
    if args.config_dir is not None:
        declarations = load_config_dir(args.config_dir, args.require_frequency)
    else:
        source = args.file.read_text() if args.file is not None else args.source
        declarations = parse_declarations(source, args.require_frequency)

    if len(declarations) == 1 and declarations[0].binding == Binding.LOCAL:
        text = c_initializer(generate(declarations[0].config)) + "\n"
        if args.out is not None:
            args.out.write_text(text)
        return text
    return generate_header(declarations, args.out)


def main(argv=None):
    args = parse_arguments(argv)
    try:
        text = run(args)
    except SineWaveError as e:
        where = f"{args.file}:" if args.file is not None else ""
        if e.span is not None:
            where += f"{e.span.line}:{e.span.column}:"
        print(f"sine-table: {where + ' ' if where else ''}error: {e.message}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"sine-table: error: {e}", file=sys.stderr)
        return 1
    if args.out is None:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
