"""TechnicalScorer snapshot/histories and ChartAssembler alignment."""

import numpy as np
import pytest

from analysis.technical_scorers.technical_scorer import TechnicalScorer
from analysis.technical_scorers.chart_assembler import ChartAssembler
from utils.unified_schema import IndicatorHistory

from conftest import make_series


def test_rising_series_snapshot(rising_series):
    tech = TechnicalScorer(rising_series).calculate()

    assert tech.error is None
    assert tech.data_points == 250
    assert tech.trend == 'uptrend'
    assert tech.rsi > 50
    assert tech.sma50 == pytest.approx(125.5)
    assert tech.sma200 == pytest.approx(106.38, abs=0.01)
    assert tech.current_price == 150.0
    assert any(s.type == 'buy' and s.indicator == 'MA' for s in tech.signals)


def test_snapshot_values_are_rounded(rising_series):
    tech = TechnicalScorer(rising_series).calculate()
    assert tech.bollinger.upper == round(tech.bollinger.upper, 2)
    assert tech.macd.macd == round(tech.macd.macd, 4)


def test_short_series_returns_unknown_set():
    tech = TechnicalScorer(make_series([100.0] * 150)).calculate()
    assert tech.rsi is None
    assert tech.sma50 is None
    assert tech.macd is None
    assert tech.trend == 'unknown'
    assert tech.rsi_level == 'unknown'
    assert tech.signals == []
    assert "200" in tech.error and "150" in tech.error


def test_custom_minimum_history():
    tech = TechnicalScorer(make_series([100.0 + i for i in range(60)]), min_data_points=50).calculate()
    assert tech.error is None
    assert tech.sma50 is not None
    assert tech.sma200 is None
    assert tech.trend == 'unknown'


def test_histories_are_tail_aligned(rising_series):
    histories = TechnicalScorer(rising_series).calculate_histories()
    assert histories['sma50'].start_index == 49
    assert histories['sma200'].start_index == 199
    assert histories['macd'].start_index == 25
    assert len(histories['sma200'].values) == 51


def test_indicator_history_value_at():
    history = IndicatorHistory.aligned('x', [1, 2, 3], series_length=10)
    assert history.start_index == 7
    assert history.value_at(6) is None
    assert history.value_at(7) == 1
    assert history.value_at(9) == 3
    assert history.value_at(10) is None


def test_chart_rows_carry_values_only_from_start_index(rising_series):
    histories = TechnicalScorer(rising_series).calculate_histories()
    chart = ChartAssembler().assemble(
        rising_series, histories['sma50'], histories['sma200'], histories['macd']
    )

    assert chart.data_points == len(rising_series) == len(chart.rows)
    for i, row in enumerate(chart.rows):
        assert (row.sma50 is not None) == (i >= histories['sma50'].start_index)
        assert (row.sma200 is not None) == (i >= histories['sma200'].start_index)
        assert (row.macd is not None) == (i >= histories['macd'].start_index)
        assert (row.histogram is not None) == (row.macd is not None)


def test_chart_summary(rising_series):
    histories = TechnicalScorer(rising_series).calculate_histories()
    chart = ChartAssembler().assemble(
        rising_series, histories['sma50'], histories['sma200'], histories['macd'], period='1y'
    )
    summary = chart.summary

    assert chart.period == '1y'
    assert summary.first_date == rising_series.iso_date(0)
    assert summary.last_date == rising_series.iso_date(249)
    assert summary.highest_price == 151.0
    assert summary.lowest_price == 99.0
    # volumes are 1000..1249
    assert summary.average_volume in (1124, 1125)
    assert (summary.sma50_points, summary.sma200_points, summary.macd_points) == (201, 51, 225)


def test_chart_last_row_matches_snapshot(rising_series):
    scorer = TechnicalScorer(rising_series)
    histories = scorer.calculate_histories()
    chart = ChartAssembler().assemble(
        rising_series, histories['sma50'], histories['sma200'], histories['macd']
    )
    tech = scorer.calculate()
    assert chart.rows[-1].sma50 == tech.sma50
    assert chart.rows[-1].sma200 == tech.sma200
    assert chart.rows[-1].macd == tech.macd.macd


@pytest.mark.parametrize("seed", range(20))
def test_rounded_bollinger_is_exactly_symmetric(seed):
    rng = np.random.default_rng(seed)
    closes = rng.uniform(1, 2000) * np.exp(np.cumsum(rng.normal(0, 0.02, 210)))
    bands = TechnicalScorer(make_series([float(c) for c in closes])).calculate().bollinger
    assert bands.upper - bands.middle == bands.middle - bands.lower
    assert bands.middle == round(bands.middle, 2)
    assert bands.upper == round(bands.upper, 2)
    assert bands.lower == pytest.approx(round(bands.lower, 2), abs=1e-9)
