# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
The sine_table Python library.

For generating precomputed signed integer sine wave tables at build time,
so that no trigonometry is needed at run time.
"""

from importlib import metadata as _metadata

__version__ = _metadata.version("sine_table")


def sine_wave(source: str, require_frequency: bool = False):
    """Parse a field list such as ``"frequency: 440, type: i8"`` and
    generate its table.

    Parameters
    ----------
    source : str
        Comma separated ``name: value`` fields.
    require_frequency : bool, optional
        If True, ``frequency`` has no default and must be given.

    Returns
    -------
    SineTable
        The generated samples and their sample count.
    """
    from sine_table.design.parse_config import parse_config
    from sine_table.dsp.signal_gen import generate

    return generate(parse_config(source, require_frequency=require_frequency))
