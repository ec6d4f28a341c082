"""CommentaryGenerator narratives and holding advice with a scripted model."""

import random

import pytest

from analysis.ai_commentary.commentary_generator import (
    CommentaryGenerator, RULE_BASED_MODEL, STATIC_MODEL
)
from analysis.technical_scorers.technical_scorer import TechnicalScorer
from utils.unified_schema import (
    CompanyProfile, Holding, IndicatorSet, PortfolioPosition, StockContext
)

from conftest import FakeLLMClient, make_quote


@pytest.fixture
def context(rising_series):
    return StockContext(
        symbol="RISE",
        quote=make_quote("RISE", 150.0, previous_close=148.0),
        indicators=TechnicalScorer(rising_series).calculate(),
        profile=CompanyProfile(name="Rise Corp"),
        holding=Holding(symbol="RISE", quantity=10, buy_price=120.0),
    )


def generator(replies):
    llm = FakeLLMClient(replies)
    return CommentaryGenerator(llm_client=llm, rng=random.Random(5)), llm


# ==================== NARRATIVES ====================

def test_stock_narrative_from_model(context):
    gen, llm = generator(["<|im_start|>Rise Corp keeps climbing.<|im_end|>"])
    result = gen.analyze_stock(context)
    assert result.analysis == "Rise Corp keeps climbing."
    assert result.model == "fake/model-1"
    assert "RISE" in llm.prompts[0]


def test_custom_prompt_sent_verbatim(context):
    gen, llm = generator(["ok"])
    gen.analyze_stock(context, custom_prompt="Only talk about RSI.")
    assert llm.prompts == ["Only talk about RSI."]


def test_stock_narrative_static_fallback(context):
    gen, _ = generator([None])
    result = gen.analyze_stock(context)
    assert result.model == STATIC_MODEL
    assert result.is_static
    text = result.analysis
    assert text.startswith("RISE - Rise Corp technical report")
    for heading in ("## Where you stand", "## Key observations", "## Technical read",
                    "## Three scenarios", "## Action plan", "## One-line summary"):
        assert heading in text
    assert "Holding 10 shares at 120.00, now 150.00" in text
    assert "uptrend" in text
    assert "Disclaimer" in text


def test_blank_model_text_uses_static(context):
    gen, _ = generator(["<|im_end|>   "])
    assert gen.analyze_stock(context).model == STATIC_MODEL


def test_empty_portfolio_skips_model():
    gen, llm = generator(["should not be used"])
    result = gen.analyze_portfolio("Empty", [])
    assert result.model == STATIC_MODEL
    assert "no holdings yet" in result.analysis
    assert llm.prompts == []


def test_portfolio_static_fallback_reports_totals():
    positions = [
        PortfolioPosition(symbol="AAA", quantity=10, buy_price=100.0, current_price=120.0),
        PortfolioPosition(symbol="BBB", quantity=5, buy_price=200.0, current_price=180.0),
    ]
    gen, _ = generator([None])
    result = gen.analyze_portfolio("Core", positions)
    assert result.model == STATIC_MODEL
    assert "Invested: 2000.00" in result.analysis
    assert "Market value: 2100.00" in result.analysis
    assert "**Best performer**: AAA (+20.00%)" in result.analysis
    assert "**Needs attention**: BBB (-10.00%)" in result.analysis
    assert "diversification thin" in result.analysis


# ==================== HOLDING ADVICE ====================

def test_advice_falls_back_to_rule_based(context):
    gen, _ = generator([None])
    advice = gen.advise_holding(context.holding, context.quote, context.indicators)
    assert advice.action == 'HOLD'
    assert advice.model == RULE_BASED_MODEL
    assert advice.reasoning.startswith("AI analysis failed; system suggests:")
    assert 15 <= advice.confidence <= 95
    assert advice.stop_loss <= 150.0 * 0.95
    assert advice.technical_signals.total_score > 0


def test_advice_json_overrides_rule_based(context):
    reply = ('{"action": "BUY_MORE", "confidence": 50, "targetPrice": 170, '
             '"stopLoss": 140, "addMorePrice": 145, "reasoning": "Trend is strong."}')
    gen, llm = generator([reply])
    advice = gen.advise_holding(context.holding, context.quote, context.indicators)
    assert advice.action == 'BUY_MORE'
    assert advice.confidence != 50
    assert 42 <= advice.confidence <= 58
    assert advice.target_price == 170.0
    assert advice.reasoning == "Trend is strong."
    assert advice.model == "fake/model-1"
    assert "RISE" in llm.prompts[0]


def test_malformed_advice_json_uses_rule_based(context):
    gen, _ = generator(['{"action": BUY_MORE, confidence: }'])
    advice = gen.advise_holding(context.holding, context.quote, context.indicators)
    assert advice.model == RULE_BASED_MODEL
    assert advice.reasoning.startswith("AI analysis failed; system suggests:")


def test_advice_without_indicators_still_produces_levels():
    gen, _ = generator([None])
    holding = Holding(symbol="NEW", quantity=1, buy_price=0.0)
    advice = gen.advise_holding(holding, make_quote("NEW", 40.0), IndicatorSet(symbol="NEW"))
    assert advice.technical_signals.overall == 'N/A'
    assert advice.stop_loss <= 38.0
    assert advice.target_price >= 40.8
