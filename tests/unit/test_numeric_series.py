"""
Unit tests for NumericSeries.

Tests cover:
- Access: indexing, first/last, out-of-range failures
- Elementwise algebra against series and scalars
- Shifting with ref()
- Indicator lengths, values and degenerate windows
"""

import math

import pandas as pd
import pytest

from barkit.models.granularity import DAILY, H1, M1, Granularity
from barkit.series.numeric import NumericSeries


def series(*values, granularity=M1) -> NumericSeries:
    """Series from values given newest first."""
    return NumericSeries(granularity, values)


class TestAccess:

    def test_get_and_aliases(self):
        s = series(3, 2, 1)
        assert s.length == 3
        assert len(s) == 3
        assert s.get(0) == 3.0
        assert s.get_last() == 3.0
        assert s.get_first() == 1.0
        assert list(s) == [3.0, 2.0, 1.0]

    def test_out_of_range(self):
        s = series(1, 2)
        with pytest.raises(IndexError):
            s.get(2)
        with pytest.raises(IndexError):
            s.get(-1)
        with pytest.raises(IndexError):
            NumericSeries.empty(M1).get_first()
        with pytest.raises(IndexError):
            NumericSeries.empty(M1).get_last()

    def test_defaults(self):
        s = series(1, 2)
        assert s.get_or_default(5, -1.0) == -1.0
        assert s.get_or_default(1, -1.0) == 2.0
        assert s.is_undefined(2)
        assert not s.is_undefined(0)

    def test_generate_and_to_list(self):
        s = NumericSeries.generate(H1, 4, lambda i: i * 10)
        assert s.to_list() == [0.0, 10.0, 20.0, 30.0]
        assert s.to_list(1, 3) == [10.0, 20.0]
        assert s.granularity == H1

    def test_equality(self):
        assert series(1, 2) == series(1.0, 2.0)
        assert series(1, 2) != series(1, 2, granularity=H1)
        assert hash(series(1, 2)) == hash(series(1, 2))

    def test_to_pandas(self):
        s = series(3, 2, 1)
        plain = s.to_pandas(name="close")
        assert plain.tolist() == [3.0, 2.0, 1.0]
        assert plain.name == "close"
        indexed = s.to_pandas(times=[3_000_000, 2_000_000, 1_000_000])
        assert indexed.index[0] == pd.Timestamp("1970-01-01 00:00:03", tz="UTC")

    def test_to_pandas_times_alignment(self):
        s = series(3, 2)
        longer = s.to_pandas(times=[3_000_000, 2_000_000, 1_000_000])
        assert len(longer) == 2
        with pytest.raises(ValueError):
            s.to_pandas(times=[3_000_000])


class TestArithmetic:

    def test_series_ops_truncate_to_shorter(self):
        a = series(10, 20, 30)
        b = series(1, 2)
        assert a.add(b).to_list() == [11.0, 22.0]
        assert a.sub(b).to_list() == [9.0, 18.0]
        assert a.mul(b).to_list() == [10.0, 40.0]
        assert a.div(b).to_list() == [10.0, 10.0]
        assert a.minimum(series(15, 15, 15)).to_list() == [10.0, 15.0, 15.0]
        assert a.maximum(series(15, 15, 15)).to_list() == [15.0, 20.0, 30.0]

    def test_scalar_ops_keep_length(self):
        a = series(10, 20, 30)
        assert a.add(1).to_list() == [11.0, 21.0, 31.0]
        assert a.sub(1).to_list() == [9.0, 19.0, 29.0]
        assert a.mul(2).to_list() == [20.0, 40.0, 60.0]
        assert a.div(10).to_list() == [1.0, 2.0, 3.0]
        assert a.rsub(100).to_list() == [90.0, 80.0, 70.0]
        assert a.rdiv(60).to_list() == [6.0, 3.0, 2.0]

    def test_operators(self):
        a = series(4, 8)
        assert (a + a).to_list() == [8.0, 16.0]
        assert (a - 1).to_list() == [3.0, 7.0]
        assert (2 * a).to_list() == [8.0, 16.0]
        assert (16 / a).to_list() == [4.0, 2.0]
        assert (10 - a).to_list() == [6.0, 2.0]
        assert (-a).to_list() == [-4.0, -8.0]
        assert sum([a, a, a]).to_list() == [12.0, 24.0]

    def test_division_by_zero_follows_ieee(self):
        result = series(2, -1, 0, 4).div(series(0, 0, 0, 2)).to_list()
        assert result[0] == math.inf
        assert result[1] == -math.inf
        assert math.isnan(result[2])
        assert result[3] == 2.0

        assert series(1, 0).div(0).to_list()[0] == math.inf
        assert math.isnan((series(1, 0) / 0).get(1))
        assert series(0, 4).rdiv(-2).to_list()[0] == -math.inf
        assert (8 / series(0, 4)).to_list() == [math.inf, 2.0]

    def test_granularity_mismatch(self):
        with pytest.raises(ValueError):
            series(1, 2).add(series(1, 2, granularity=H1))

    def test_months_ignored_in_mismatch_check(self):
        # Both month-based series have zero seconds
        monthly = series(1, 2, granularity=Granularity(0, 1))
        quarterly = series(3, 4, granularity=Granularity(0, 3))
        assert monthly.add(quarterly).to_list() == [4.0, 6.0]

    def test_map(self):
        s = series(1, 4, 9).map(math.sqrt)
        assert s.to_list() == [1.0, 2.0, 3.0]
        assert s.granularity == M1


class TestRef:

    def test_ref_zero_is_self(self):
        s = series(1, 2, 3)
        assert s.ref(0) is s

    def test_ref_negative_drops_recent(self):
        assert series(1, 2, 3).ref(-1).to_list() == [2.0, 3.0]
        assert series(1, 2, 3).ref(-3).length == 0
        assert series(1, 2, 3).ref(-5).length == 0

    def test_ref_positive_rejected(self):
        with pytest.raises(ValueError):
            series(1, 2, 3).ref(1)


class TestIndicators:

    def test_sma_values(self):
        assert series(3, 9, 9, -8, 6).sma(2).to_list() == [6.0, 9.0, 0.5, -1.0]

    def test_sma_identity(self):
        s = series(0.1, 0.3, 0.7, 1.1, 0.2)
        assert s.sma(1) == s

    @pytest.mark.parametrize("periods", [1, 2, 5, 6, 9])
    def test_sma_length(self, periods):
        s = series(*range(6))
        assert s.sma(periods).length == max(0, 6 - periods + 1)

    @pytest.mark.parametrize("name", ["sma", "ema", "wilders", "dema", "tema", "tma", "rsi"])
    def test_non_positive_periods_rejected(self, name):
        s = series(1, 2, 3)
        with pytest.raises(ValueError):
            getattr(s, name)(0)
        with pytest.raises(ValueError):
            getattr(s, name)(-2)

    def test_ema_values(self):
        # chronological 1..5, seed mean(1, 2, 3) = 2, alpha = 0.5
        assert series(5, 4, 3, 2, 1).ema(3).to_list() == [4.0, 3.0, 2.0]

    def test_wilders_values(self):
        assert series(5, 4, 3, 2, 1).wilders(2).to_list() == [4.0625, 3.125, 2.25, 1.5]

    def test_smoothed_lengths(self):
        s = series(*range(10, 0, -1))
        assert s.ema(3).length == 8
        assert s.dema(3).length == 10 - 2 * 3 + 2
        assert s.tema(3).length == 10 - 3 * 3 + 3
        assert s.tma(3).length == 10 - 2 * 3 + 2
        assert s.tema(4).length == 1
        assert s.tema(5).length == 0

    def test_dema_tema_on_constant_series(self):
        s = NumericSeries.generate(DAILY, 20, lambda i: 7.0)
        assert s.dema(4).to_list() == [7.0] * 14
        assert s.tema(4).to_list() == [7.0] * 11

    def test_dema_definition(self):
        s = series(5, 1, 4, 2, 8, 3, 7)
        ema1 = s.ema(2)
        ema2 = ema1.ema(2)
        expected = ema1.mul(2).sub(ema2)
        assert s.dema(2).to_list() == pytest.approx(expected.to_list())

    def test_tma_definition(self):
        s = series(5, 1, 4, 2, 8, 3, 7)
        assert s.tma(3) == s.sma(3).sma(3)

    def test_differences(self):
        assert series(5, 3, 4).differences().to_list() == [2.0, -1.0]
        assert series(5).differences().length == 0
        assert NumericSeries.empty(M1).differences().length == 0

    def test_rsi_values(self):
        # chronological 1, 2, 1, 2, 3
        assert series(3, 2, 1, 2, 1).rsi(2).to_list() == [87.5, 75.0]

    def test_rsi_all_gains(self):
        s = NumericSeries.generate(M1, 12, lambda i: 100.0 - i)
        result = s.rsi(3)
        assert result.length == 11 - 3
        assert all(v == 100.0 for v in result)

    def test_rsi_minimal_length_is_empty(self):
        assert series(4, 3, 2, 1).rsi(3).length == 0

    def test_rsi_flat_defaults_to_neutral(self):
        s = NumericSeries.generate(M1, 8, lambda i: 1.0)
        assert s.rsi(2).to_list() == [50.0] * 5

    def test_short_windows_return_empty_series(self):
        s = series(1, 2)
        for result in (s.sma(3), s.ema(3), s.wilders(3), s.dema(2), s.tma(2), s.rsi(2)):
            assert isinstance(result, NumericSeries)
            assert result.length == 0
            assert result.granularity == M1
