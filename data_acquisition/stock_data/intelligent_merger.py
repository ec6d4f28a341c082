"""
Intelligent Data Merger - Field-level priority merging of company profiles.

The primary provider strictly dominates: a field is taken from the secondary
only when the primary's value is missing, empty, "N/A" or zero. Anything still
missing after both becomes its sentinel.

智能数据合并器 - 按字段优先级合并两个数据源的公司资料。
"""

from typing import Optional, Any, Dict, Tuple
from utils.unified_schema import (
    CompanyProfile, PROFILE_TEXT_SENTINEL, PROFILE_CURRENCY_SENTINEL
)
from utils.logger import setup_logger

logger = setup_logger('intelligent_merger')

PROFILE_FIELDS = (
    'name', 'country', 'currency', 'exchange',
    'industry', 'market_cap_billions', 'website_url',
)

SENTINELS: Dict[str, Any] = {
    'country': PROFILE_TEXT_SENTINEL,
    'currency': PROFILE_CURRENCY_SENTINEL,
    'exchange': PROFILE_TEXT_SENTINEL,
    'industry': PROFILE_TEXT_SENTINEL,
    'market_cap_billions': 0.0,
    'website_url': "",
}


def is_present(value: Any, symbol: Optional[str] = None) -> bool:
    """True when a profile value carries information."""
    if value is None:
        return False
    if isinstance(value, str):
        text = value.strip()
        if not text or text == PROFILE_TEXT_SENTINEL:
            return False
        # Providers echo the ticker back as the name when they know nothing
        if symbol and text.upper() == symbol.upper():
            return False
        return True
    if isinstance(value, (int, float)):
        return value != 0
    return True


def is_profile_complete(profile: Optional[CompanyProfile], symbol: str) -> bool:
    """Complete = real name, an industry, and a positive market cap."""
    if profile is None:
        return False
    return (
        is_present(profile.name, symbol)
        and is_present(profile.industry)
        and (profile.market_cap_billions or 0) > 0
    )


def merge_field(
    field_name: str,
    primary: Optional[CompanyProfile],
    secondary: Optional[CompanyProfile],
    symbol: str
) -> Tuple[Any, Optional[str]]:
    """
    Merge a single profile field.

    Returns:
        Tuple of (value, source that provided it); source is None for sentinels
    """
    check_symbol = symbol if field_name == 'name' else None
    for profile in (primary, secondary):
        if profile is None:
            continue
        value = getattr(profile, field_name)
        if is_present(value, check_symbol):
            return value, profile.source

    if field_name == 'name':
        return symbol, None
    return SENTINELS[field_name], None


class IntelligentMerger:
    """Field-level profile merger for one symbol."""

    def __init__(self, symbol: str):
        self.symbol = symbol.upper()
        self.field_sources: Dict[str, Optional[str]] = {}

    def merge_profiles(
        self,
        primary: Optional[CompanyProfile],
        secondary: Optional[CompanyProfile]
    ) -> CompanyProfile:
        """
        Merge two partial profiles into one with every field populated.

        Args:
            primary: Profile from the primary provider (wins per field)
            secondary: Profile from the secondary provider (fills gaps)

        Returns:
            CompanyProfile with sentinels in place of missing values
        """
        merged = {}
        for field_name in PROFILE_FIELDS:
            value, source = merge_field(field_name, primary, secondary, self.symbol)
            merged[field_name] = value
            self.field_sources[field_name] = source

        filled = [
            f for f, s in self.field_sources.items()
            if secondary is not None and s == secondary.source
        ]
        if filled and (primary is None or primary.source != secondary.source):
            logger.info(f"{self.symbol}: secondary filled {', '.join(filled)}")

        return CompanyProfile(**merged, source='fused')

    def finalize(self, profile: Optional[CompanyProfile]) -> CompanyProfile:
        """Apply sentinels to a single-provider profile."""
        return self.merge_profiles(profile, None)
