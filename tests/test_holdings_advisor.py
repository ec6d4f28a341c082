"""Batch holding advice and the portfolio summary roll-up."""

import random

import pytest

from analysis.ai_commentary.commentary_generator import CommentaryGenerator
from analysis.portfolio.holdings_advisor import HoldingsAdvisor, degraded_advice, summarize_advice
from analysis.stock.stock_service import StockService
from data_acquisition.orchestration.provider_fusion import ProviderFusion
from utils.unified_schema import AdviceRecord, Holding

from conftest import FakeLLMClient, FakeProvider, make_quote, make_series, rising_closes


@pytest.fixture
def advisor():
    primary = FakeProvider(
        'yahoo',
        quotes={'AAA': make_quote('AAA', 150.0), 'CCC': make_quote('CCC', 140.0)},
        series={'AAA': make_series(rising_closes(), 'AAA'), 'CCC': make_series(rising_closes(), 'CCC')},
    )
    generator = CommentaryGenerator(llm_client=FakeLLMClient(), rng=random.Random(2))
    service = StockService(fusion=ProviderFusion(primary, FakeProvider('finnhub')), generator=generator)
    return HoldingsAdvisor(service, max_workers=4)


def advice(action, confidence=60):
    return AdviceRecord(symbol='X', action=action, confidence=confidence)


def test_advice_keeps_input_order_and_degrades_failures(advisor):
    holdings = [
        Holding(symbol='AAA', quantity=10, buy_price=120.0, id='h1'),
        Holding(symbol='BAD', quantity=5, buy_price=30.0, id='h2', current_price=20.0),
        Holding(symbol='CCC', quantity=1, buy_price=150.0, id='h3'),
    ]
    results = advisor.advise(holdings)

    assert [r.symbol for r in results] == ['AAA', 'BAD', 'CCC']
    assert [r.holding_id for r in results] == ['h1', 'h2', 'h3']

    bad = results[1]
    assert bad.action == 'HOLD'
    assert bad.confidence == 0
    assert bad.target_price == 20.0
    assert bad.stop_loss == pytest.approx(19.0)
    assert "BAD" in bad.reasoning

    assert results[0].confidence >= 15
    assert results[0].reasoning.startswith("AI analysis failed")


def test_no_holdings_no_work(advisor):
    assert advisor.advise([]) == []


def test_degraded_advice_without_known_price():
    record = degraded_advice(Holding(symbol='ZZZ'))
    assert record.target_price == 0.0
    assert record.stop_loss == 0.0
    assert record.reasoning == "Could not fetch data for ZZZ; please check it manually."


def test_summary_sell_takes_priority():
    summary = summarize_advice([advice('SELL'), advice('BUY_MORE'), advice('BUY_MORE')])
    assert summary.high_risk == 1
    assert summary.suggestion.startswith("1 holding(s) flagged to sell")


def test_summary_over_half_need_action():
    summary = summarize_advice([advice('REDUCE'), advice('BUY_MORE'), advice('REDUCE'), advice('HOLD')])
    assert summary.need_action == 3
    assert "(3/4)" in summary.suggestion


def test_summary_exactly_half_is_not_over_half():
    summary = summarize_advice([advice('BUY_MORE'), advice('BUY_MORE'), advice('HOLD'), advice('HOLD')])
    assert summary.opportunities == 2
    assert summary.suggestion.startswith("2 holding(s) look suitable for adding")


def test_summary_steady_portfolio():
    summary = summarize_advice([advice('HOLD'), advice('HOLD')])
    assert summary.suggestion == "The portfolio looks steady; keep monitoring."
    assert summary.actions_count == {'HOLD': 2, 'BUY_MORE': 0, 'REDUCE': 0, 'SELL': 0}


def test_summary_average_confidence_rounds_half_up():
    assert summarize_advice([advice('HOLD', 50), advice('HOLD', 51)]).avg_confidence == 51
    assert summarize_advice([advice('HOLD', 60), advice('HOLD', 61), advice('HOLD', 61)]).avg_confidence == 61


def test_empty_summary():
    summary = summarize_advice([])
    assert summary.total_holdings == 0
    assert summary.avg_confidence == 0
    assert summary.suggestion == "The portfolio looks steady; keep monitoring."


class ExplodingGenerator(CommentaryGenerator):
    """Fails with a non-market error for one symbol."""

    def __init__(self, bad_symbol, **kwargs):
        super().__init__(**kwargs)
        self.bad_symbol = bad_symbol

    def advise_holding(self, holding, *args, **kwargs):
        if holding.symbol == self.bad_symbol:
            raise RuntimeError("unexpected response shape")
        return super().advise_holding(holding, *args, **kwargs)


def test_unexpected_error_degrades_only_that_holding():
    primary = FakeProvider(
        'yahoo',
        quotes={'AAA': make_quote('AAA', 150.0), 'CCC': make_quote('CCC', 140.0)},
        series={'AAA': make_series(rising_closes(), 'AAA'), 'CCC': make_series(rising_closes(), 'CCC')},
    )
    generator = ExplodingGenerator('AAA', llm_client=FakeLLMClient(), rng=random.Random(2))
    service = StockService(fusion=ProviderFusion(primary, FakeProvider('finnhub')), generator=generator)
    holdings = [
        Holding(symbol='AAA', quantity=10, buy_price=120.0, id='h1', current_price=150.0),
        Holding(symbol='CCC', quantity=1, buy_price=150.0, id='h2'),
    ]
    results = HoldingsAdvisor(service, max_workers=2).advise(holdings)

    assert [r.holding_id for r in results] == ['h1', 'h2']
    assert results[0].confidence == 0
    assert results[0].reasoning == "Could not fetch data for AAA; please check it manually."
    assert results[1].confidence >= 15
