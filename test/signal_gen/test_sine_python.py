# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import math
import warnings

import numpy as np
import pytest

import sine_table.dsp.signal_gen as gen
import sine_table.dsp.utils as utils
from sine_table.dsp.types import SampleType
from sine_table.errors import DegenerateWaveError, FrequencyExceedsRateError
from sine_table.models.config import SineWaveConfig

WAVE_100_10 = [0, 19259, 31163, 31163, 19259, 0, -19259, -31163, -31163, -19259]

WAVE_100_10_I8 = [0, 74, 120, 120, 74, 0, -74, -120, -120, -74]

WAVE_44100_441 = [
    0, 2057, 4106, 6139, 8148, 10125, 12062, 13951, 15785, 17557, 19259, 20886, 22430, 23886,
    25247, 26509, 27666, 28713, 29648, 30465, 31163, 31737, 32186, 32508, 32702, 32767, 32702,
    32508, 32186, 31737, 31163, 30465, 29648, 28713, 27666, 26509, 25247, 23886, 22430, 20886,
    19259, 17557, 15785, 13951, 12062, 10125, 8148, 6139, 4106, 2057, 0, -2057, -4106, -6139,
    -8148, -10125, -12062, -13951, -15785, -17557, -19259, -20886, -22430, -23886, -25247,
    -26509, -27666, -28713, -29648, -30465, -31163, -31737, -32186, -32508, -32702, -32767,
    -32702, -32508, -32186, -31737, -31163, -30465, -29648, -28713, -27666, -26509, -25247,
    -23886, -22430, -20886, -19259, -17557, -15785, -13951, -12062, -10125, -8148, -6139,
    -4106, -2057,
]


def gen_table(**kwargs):
    return gen.generate(SineWaveConfig(**kwargs))


def test_100_10():
    table = gen_table(frequency=10, rate=100)
    assert table.tolist() == WAVE_100_10
    assert table.count == 10
    assert table.period == 10
    assert table.samples.dtype == np.int16


def test_100_10_i8():
    table = gen_table(frequency=10, rate=100, type="i8")
    assert table.tolist() == WAVE_100_10_I8
    assert table.samples.dtype == np.int8


def test_100_10_i32():
    table = gen_table(frequency=10, rate=100, type="i32")
    assert table.samples.dtype == np.int32
    assert table.samples[0] == 0
    assert 0.95 * utils.Q_max(31) < table.samples.max() <= utils.Q_max(31)
    assert table.samples.min() >= -utils.Q_max(31)


def test_44100_441():
    table = gen_table(frequency=441, rate=44100)
    assert table.tolist() == WAVE_44100_441
    assert table.realized_frequency == 441.0


def test_44100_441_partial():
    table = gen_table(frequency=441, rate=44100, len=10)
    assert table.tolist() == WAVE_44100_441[:10]
    assert table.count == 10


def test_rounding_equivalence():
    with pytest.warns(utils.FrequencyRoundingWarning):
        table_440 = gen_table(frequency=440, rate=44100)
    table_441 = gen_table(frequency=441, rate=44100)
    np.testing.assert_array_equal(table_440.samples, table_441.samples)
    assert table_440.realized_frequency == 441.0


def test_exact_division_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        gen_table(frequency=441, rate=44100)


def test_defaults_do_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        table = gen_table()
    assert table.period == 100
    with pytest.warns(utils.FrequencyRoundingWarning):
        gen_table(rate=44100)


@pytest.mark.parametrize("frequency, rate", [(10, 100), (441, 44100), (1000, 48000), (3, 48)])
@pytest.mark.parametrize("sample_type", list(SampleType))
def test_one_period(frequency, rate, sample_type):
    table = gen_table(frequency=frequency, rate=rate, type=sample_type)
    n = rate // frequency
    assert table.count == n
    assert table.samples[0] == 0
    # truncation is never more than one step from rounding
    k = np.arange(n)
    ref = np.round(np.sin(2 * np.pi * k / n) * sample_type.max)
    assert np.all(np.abs(table.samples.astype(np.int64) - ref) <= 1)
    assert np.max(np.abs(table.samples.astype(np.int64))) <= sample_type.max
    # the wave is ascending from zero
    assert table.samples[1] > 0


@pytest.mark.parametrize("repeats", [1, 2, 5])
@pytest.mark.parametrize("frequency, rate", [(10, 100), (441, 44100), (7, 100)])
def test_repeats_len_equivalence(frequency, rate, repeats):
    n = gen.period_length(frequency, rate)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", utils.FrequencyRoundingWarning)
        by_repeats = gen_table(frequency=frequency, rate=rate, repeats=repeats)
        by_len = gen_table(frequency=frequency, rate=rate, len=n * repeats)
    np.testing.assert_array_equal(by_repeats.samples, by_len.samples)
    assert by_repeats.count == n * repeats


def test_repeats_concatenates():
    table = gen_table(frequency=10, rate=100, repeats=2)
    assert table.tolist() == WAVE_100_10 + WAVE_100_10


def test_len_cuts_period():
    table = gen_table(frequency=10, rate=100, len=15)
    assert table.tolist() == WAVE_100_10 + WAVE_100_10[:5]


@pytest.mark.parametrize("skip", [0, 3, 9, 10, 13, 25, 1000])
def test_skip_periodicity(skip):
    table = gen_table(frequency=10, rate=100, skip=skip)
    wrapped = gen_table(frequency=10, rate=100, skip=skip % 10)
    np.testing.assert_array_equal(table.samples, wrapped.samples)
    assert table.tolist() == (WAVE_100_10 * 2)[skip % 10 : skip % 10 + 10]


def test_skip_quarter_period_is_cosine():
    assert gen_table(frequency=100, rate=400).tolist() == [0, 32767, 0, -32767]
    assert gen_table(frequency=100, rate=400, skip=1).tolist() == [32767, 0, -32767, 0]


def test_skip_with_len_and_repeats():
    table = gen_table(frequency=10, rate=100, skip=5, len=3)
    assert table.tolist() == [0, -19259, -31163]
    table = gen_table(frequency=10, rate=100, skip=5, repeats=2)
    assert table.tolist() == (WAVE_100_10[5:] + WAVE_100_10[:5]) * 2


def test_degenerate_wave():
    with pytest.raises(DegenerateWaveError) as e:
        gen_table(frequency=50, rate=100)
    assert e.value.field == "frequency"
    assert "100 Hz" in e.value.message and "50 Hz" in e.value.message


@pytest.mark.parametrize("frequency, rate", [(100, 100), (60, 100), (44100, 44100)])
def test_period_too_short(frequency, rate):
    with pytest.raises(FrequencyExceedsRateError) as e:
        gen_table(frequency=frequency, rate=rate)
    assert e.value.field == "frequency"


def test_period_too_short_blames_supplied_rate():
    # frequency defaults to 440 Hz
    with pytest.raises(FrequencyExceedsRateError) as e:
        gen_table(rate=440)
    assert e.value.field == "rate"


def test_period_length():
    assert gen.period_length(440, 44100) == 100
    assert gen.period_length(441, 44100) == 100
    assert gen.period_length(400, 16000) == 40
    assert gen.period_length(60, 100) == 1


def test_sine_period():
    period = gen.sine_period(10, SampleType.I8)
    assert period.tolist() == WAVE_100_10_I8
    assert period.dtype == np.int8


def test_cyclic_take():
    period = np.arange(5)
    assert gen.cyclic_take(period, 7, 8).tolist() == [2, 3, 4, 0, 1, 2, 3, 4]
    assert gen.cyclic_take(period, 0, 3).tolist() == [0, 1, 2]


def test_output_count():
    assert gen.output_count(SineWaveConfig(), 100) == 100
    assert gen.output_count(SineWaveConfig(repeats=3), 100) == 300
    assert gen.output_count(SineWaveConfig(len=7), 100) == 7


def test_sine_wave_entry_point():
    from sine_table import sine_wave

    assert sine_wave("frequency: 10, rate: 100, type: i8").tolist() == WAVE_100_10_I8
