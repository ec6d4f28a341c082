"""
Model response handling: chat-template cleanup, JSON advice extraction and
confidence settling.
"""

import json
import random
import re
from typing import Any, Dict, Optional

from config.analysis_config import ADVICE_CONFIG
from utils.errors import LLMError
from utils.numeric_utils import clean_numeric
from utils.unified_schema import AdviceRecord

# Chat-template residue some models echo back
_TEMPLATE_PATTERNS = [
    re.compile(r'<\|.*?\|>'),
    re.compile(r'\[INST\].*?\[/INST\]', re.DOTALL),
    re.compile(r'### Assistant:'),
    re.compile(r'### User:'),
]

# Greedy: first '{' to last '}'
_JSON_BLOCK = re.compile(r'\{[\s\S]*\}')

REASONING_PREVIEW_CHARS = 200


class AdviceParseError(LLMError):
    """The model answered with a JSON-looking block that does not decode."""


def clean_response(text: Optional[str]) -> str:
    if not text:
        return ""
    for pattern in _TEMPLATE_PATTERNS:
        text = pattern.sub('', text)
    return text.strip()


def extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """
    Decode the first {...} block of a model reply.

    Returns:
        The decoded object, or None when the reply has no braces at all

    Raises:
        AdviceParseError: a block exists but is not a JSON object
    """
    match = _JSON_BLOCK.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AdviceParseError(f"Invalid advice JSON: {e}") from e
    if not isinstance(data, dict):
        raise AdviceParseError("Advice JSON is not an object")
    return data


def settle_confidence(value: float, rng: random.Random) -> int:
    """
    Clamp to [0, 100] and nudge values sitting exactly on 0/25/50/75/100
    by a random 1-8 points either way.
    """
    confidence = int(round(max(0.0, min(100.0, value))))
    if confidence in ADVICE_CONFIG['ROUND_CONFIDENCE_MARKS']:
        low, high = ADVICE_CONFIG['PERTURBATION_RANGE']
        adjustment = rng.randint(low, high)
        confidence += adjustment if rng.random() > 0.5 else -adjustment
        confidence = max(0, min(100, confidence))
    return confidence


def _positive_price(value: Any, fallback: float) -> float:
    number = clean_numeric(value)
    if number is None or number <= 0:
        return fallback
    return round(number, 2)


def parse_advice_response(
    text: str,
    rule_based: AdviceRecord,
    model: str,
    rng: random.Random
) -> AdviceRecord:
    """
    Merge a model reply into the rule-based advice.

    Model fields win where present and valid; everything else keeps the
    rule-based value. A reply without any JSON keeps the rule-based advice
    and uses the reply text as reasoning.

    Raises:
        AdviceParseError: the reply contains a malformed JSON block
    """
    cleaned = clean_response(text)
    data = extract_json_block(cleaned)

    if data is None:
        return rule_based.model_copy(update={
            'reasoning': cleaned[:REASONING_PREVIEW_CHARS] or rule_based.reasoning,
            'model': model,
        })

    action = str(data.get('action') or '').strip().upper()
    if action not in ADVICE_CONFIG['VALID_ACTIONS']:
        action = 'HOLD'

    # A missing or zero confidence falls back to the rule-based value
    raw_confidence = clean_numeric(data.get('confidence'))
    confidence = settle_confidence(raw_confidence or rule_based.confidence, rng)

    reasoning = str(data.get('reasoning') or '').strip() or cleaned[:REASONING_PREVIEW_CHARS]

    return rule_based.model_copy(update={
        'action': action,
        'confidence': confidence,
        'target_price': _positive_price(data.get('targetPrice'), rule_based.target_price),
        'stop_loss': _positive_price(data.get('stopLoss'), rule_based.stop_loss),
        'add_more_price': _positive_price(data.get('addMorePrice'), rule_based.add_more_price),
        'reasoning': reasoning,
        'model': model,
    })
