"""
AI Commentary Generator.
Produces stock and portfolio narratives and structured holding advice through
the LLM client, falling back to static templates and rule-based advice.
"""

import random
from typing import List, Optional

from config.analysis_config import ADVICE_CONFIG
from config.constants import STOCK_ANALYSIS_EXTRA_MODELS
from utils.errors import LLMError
from utils.logger import setup_logger
from utils.numeric_utils import pnl_percent
from utils.unified_schema import (
    AdviceRecord, Holding, IndicatorSet, NarrativeResult, NewsItem,
    PortfolioPosition, Quote, StockContext
)
from analysis.reporting.llm_client import LLMClient
from analysis.technical_scorers.signal_scorer import SignalScorer
from analysis.ai_commentary.prompts import (
    STOCK_SYSTEM_PROMPT, ADVICE_SYSTEM_PROMPT,
    build_stock_prompt, build_portfolio_prompt, build_holding_advice_prompt
)
from analysis.ai_commentary.response_parser import clean_response, parse_advice_response
from analysis.ai_commentary.static_templates import (
    build_static_stock_analysis, build_static_portfolio_analysis
)

logger = setup_logger('ai_commentary')

STATIC_MODEL = 'static-fallback'
RULE_BASED_MODEL = 'rule-based'


class CommentaryGenerator:
    """Generates narratives and holding advice, degrading to deterministic output."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        scorer: Optional[SignalScorer] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            llm_client: Text-generation client (defaults to the configured router client)
            scorer: Rule-based scorer for signals, levels and base confidence
            rng: Random source for confidence jitter and perturbation
        """
        self.llm = llm_client or LLMClient()
        self.rng = rng or random.Random()
        self.scorer = scorer or SignalScorer(self.rng)

    # ==================== NARRATIVES ====================

    def analyze_stock(self, context: StockContext, custom_prompt: Optional[str] = None) -> NarrativeResult:
        prompt = custom_prompt or build_stock_prompt(context)
        result = self.llm.generate_text(
            prompt,
            system_prompt=STOCK_SYSTEM_PROMPT,
            max_tokens=ADVICE_CONFIG['NARRATIVE_MAX_TOKENS'],
            extra_models=STOCK_ANALYSIS_EXTRA_MODELS,
        )
        if result is not None:
            text = clean_response(result.text)
            if text:
                return NarrativeResult(analysis=text, model=result.model)

        logger.warning(f"{context.symbol}: all AI models failed, using static analysis")
        return NarrativeResult(analysis=build_static_stock_analysis(context), model=STATIC_MODEL)

    def analyze_portfolio(self, portfolio_name: str, positions: List[PortfolioPosition]) -> NarrativeResult:
        if positions:
            result = self.llm.generate_text(
                build_portfolio_prompt(portfolio_name, positions),
                system_prompt=STOCK_SYSTEM_PROMPT,
                max_tokens=ADVICE_CONFIG['NARRATIVE_MAX_TOKENS'],
            )
            if result is not None:
                text = clean_response(result.text)
                if text:
                    return NarrativeResult(analysis=text, model=result.model)
            logger.warning(f"Portfolio '{portfolio_name}': all AI models failed, using static analysis")

        return NarrativeResult(
            analysis=build_static_portfolio_analysis(portfolio_name, positions),
            model=STATIC_MODEL,
        )

    # ==================== HOLDING ADVICE ====================

    def advise_holding(
        self,
        holding: Holding,
        quote: Quote,
        indicators: IndicatorSet,
        news: Optional[List[NewsItem]] = None
    ) -> AdviceRecord:
        """
        Structured advice for one holding.

        Rule-based signals, price levels and base confidence are always
        computed; the model may override action, confidence, levels and
        reasoning. Model failures return the rule-based advice.
        """
        price = quote.current_price
        buy_price = holding.buy_price or price
        signals = self.scorer.calculate_signals(indicators, price)
        levels = self.scorer.calculate_price_levels(price, buy_price, indicators, signals)
        base_confidence = self.scorer.base_confidence(
            signals, indicators.rsi, pnl_percent(price, buy_price)
        )

        rule_based = AdviceRecord(
            symbol=holding.symbol,
            action='HOLD',
            confidence=base_confidence,
            target_price=levels.target_price,
            stop_loss=levels.stop_loss,
            add_more_price=levels.add_more_price,
            reasoning="Technicals broadly neutral; keep watching.",
            technical_signals=signals,
            model=RULE_BASED_MODEL,
            holding_id=holding.id,
        )

        prompt = build_holding_advice_prompt(
            holding, quote, indicators, signals, levels, base_confidence, news or []
        )
        try:
            result = self.llm.generate_text(
                prompt,
                system_prompt=ADVICE_SYSTEM_PROMPT,
                max_tokens=ADVICE_CONFIG['ADVICE_MAX_TOKENS'],
            )
            if result is None:
                raise LLMError("no model produced advice")
            return parse_advice_response(result.text, rule_based, result.model, self.rng)
        except LLMError as e:
            logger.warning(f"{holding.symbol}: AI advice unavailable ({e})")
            return rule_based.model_copy(update={
                'reasoning': f"AI analysis failed; system suggests: {levels.target_reason}",
            })
