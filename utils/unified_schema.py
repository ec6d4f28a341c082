"""
Unified Data Schema
===================

Data models shared by providers, the indicator engine, the scorer and the
commentary layer. Everything that crosses a module boundary is one of these
Pydantic models, so upstream payloads are validated once, at the provider.

Unit Conventions
----------------
- Prices: raw quote currency per share.
- Volume: shares.
- Market cap: billions of the listing currency.
- Percentages (change_percent, P/L, confidence): 0-100 scale, NOT decimals.
- Timestamps: epoch seconds (UTC).

Sentinels
---------
Profile fields are Optional until fusion; afterwards missing text fields are
"N/A", currency "USD", market cap 0.0 and website "".
"""

from datetime import datetime, timezone
from typing import Optional, Literal, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, model_validator

DataSource = Literal['yahoo', 'finnhub', 'fused']

RsiLevel = Literal['overbought', 'oversold', 'strong', 'weak', 'unknown']
TrendLabel = Literal['uptrend', 'downtrend', 'consolidating', 'unknown']
CrossState = Literal['golden', 'death', 'neutral']
AdviceAction = Literal['HOLD', 'BUY_MORE', 'REDUCE', 'SELL']

PROFILE_TEXT_SENTINEL = "N/A"
PROFILE_CURRENCY_SENTINEL = "USD"


# ==================== MARKET DATA ====================

class PriceSeries(BaseModel):
    """Daily OHLCV bars, ascending by timestamp. Missing values are 0.0."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    timestamps: List[int] = Field(default_factory=list)
    open: List[float] = Field(default_factory=list)
    high: List[float] = Field(default_factory=list)
    low: List[float] = Field(default_factory=list)
    close: List[float] = Field(default_factory=list)
    volume: List[float] = Field(default_factory=list)

    @model_validator(mode='after')
    def _check_lengths(self):
        n = len(self.timestamps)
        for name in ('open', 'high', 'low', 'close', 'volume'):
            if len(getattr(self, name)) != n:
                raise ValueError(f"{name} has {len(getattr(self, name))} values, expected {n}")
        return self

    def __len__(self) -> int:
        return len(self.timestamps)

    @property
    def is_empty(self) -> bool:
        return len(self.timestamps) == 0

    def iso_date(self, index: int) -> str:
        return datetime.fromtimestamp(self.timestamps[index], tz=timezone.utc).strftime('%Y-%m-%d')


class Quote(BaseModel):
    """Latest trading snapshot."""
    symbol: str
    current_price: float
    change: float = 0.0
    change_percent: float = 0.0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    previous_close: float = 0.0
    volume: float = 0.0
    timestamp: int = 0
    source: Optional[DataSource] = None

    @classmethod
    def from_prices(cls, symbol: str, current_price: float, previous_close: float, **kwargs) -> "Quote":
        """Build a quote, deriving change and change_percent from the two prices."""
        change = current_price - previous_close
        change_percent = (change / previous_close * 100) if previous_close else 0.0
        return cls(
            symbol=symbol,
            current_price=current_price,
            previous_close=previous_close,
            change=change,
            change_percent=change_percent,
            **kwargs,
        )


class CompanyProfile(BaseModel):
    """Company metadata. Each field is independently optional before fusion."""
    name: Optional[str] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None
    industry: Optional[str] = None
    market_cap_billions: Optional[float] = None
    website_url: Optional[str] = None
    source: Optional[DataSource] = None


class NewsItem(BaseModel):
    headline: str
    summary: str = ""
    source: str = ""
    url: str = ""
    published_at: str = ""  # ISO-8601


class SymbolMatch(BaseModel):
    symbol: str
    name: str = ""
    type: str = ""
    exchange: str = ""
    region: str = "US"


# ==================== INDICATORS ====================

class MacdPoint(BaseModel):
    macd: float
    signal: float
    histogram: float


class BollingerBands(BaseModel):
    upper: float
    middle: float
    lower: float

    @classmethod
    def around(cls, middle: float, width: float, digits: Optional[int] = None) -> "BollingerBands":
        """
        Bands `width` above and below `middle`, optionally rounded to `digits`.

        Only middle and upper are rounded; lower is mirrored as
        2 * middle - upper, which is exact in floating point while
        upper <= 4 * middle, so upper - middle == middle - lower holds
        bit for bit.
        """
        if digits is not None:
            middle = round(middle, digits)
            upper = round(middle + width, digits)
        else:
            upper = middle + width
        return cls(upper=upper, middle=middle, lower=2 * middle - upper)


class TradeSignal(BaseModel):
    type: Literal['buy', 'sell']
    indicator: str
    reason: str
    strength: Literal['weak', 'medium', 'strong']
    value: str


class IndicatorSet(BaseModel):
    """
    Technical snapshot for one symbol. Computed per request, never cached.
    Unknown values are None; `error` explains an all-unknown set.
    """
    symbol: str
    rsi: Optional[float] = None
    rsi_level: RsiLevel = 'unknown'
    rsi_hint: str = ""
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    macd: Optional[MacdPoint] = None
    bollinger: Optional[BollingerBands] = None
    volatility: Optional[float] = None
    trend: TrendLabel = 'unknown'
    current_price: Optional[float] = None
    data_points: int = 0
    signals: List[TradeSignal] = Field(default_factory=list)
    error: Optional[str] = None


class IndicatorHistory(BaseModel):
    """
    Indicator values aligned to the tail of a series.
    values[i] belongs to series index start_index + i.
    """
    name: str
    values: List[Any] = Field(default_factory=list)
    start_index: int = 0

    @classmethod
    def aligned(cls, name: str, values: List[Any], series_length: int) -> "IndicatorHistory":
        return cls(name=name, values=list(values), start_index=max(0, series_length - len(values)))

    def value_at(self, series_index: int) -> Any:
        offset = series_index - self.start_index
        if offset < 0 or offset >= len(self.values):
            return None
        return self.values[offset]


# ==================== CHART ====================

class ChartRow(BaseModel):
    date: str
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    macd: Optional[float] = None
    signal: Optional[float] = None
    histogram: Optional[float] = None


class ChartSummary(BaseModel):
    first_date: Optional[str] = None
    last_date: Optional[str] = None
    highest_price: Optional[float] = None
    lowest_price: Optional[float] = None
    average_volume: int = 0
    sma50_points: int = 0
    sma200_points: int = 0
    macd_points: int = 0


class ChartData(BaseModel):
    symbol: str
    period: str = '1y'
    data_points: int = 0
    rows: List[ChartRow] = Field(default_factory=list)
    summary: ChartSummary = Field(default_factory=ChartSummary)


# ==================== SCORING & ADVICE ====================

class IndicatorScore(BaseModel):
    text: str = 'N/A'
    score: float = 0.0


class TechnicalSignals(BaseModel):
    """Per-indicator 0-2.5 scores plus the bullish/bearish tally."""
    macd: IndicatorScore = Field(default_factory=IndicatorScore)
    rsi: IndicatorScore = Field(default_factory=IndicatorScore)
    ma: IndicatorScore = Field(default_factory=IndicatorScore)
    bollinger: IndicatorScore = Field(default_factory=IndicatorScore)
    macd_state: Optional[CrossState] = None
    ma_state: Optional[CrossState] = None
    overall: str = 'N/A'
    bias: Optional[Literal['bullish', 'bearish', 'neutral']] = None
    bullish_score: int = 0
    bearish_score: int = 0

    @property
    def total_score(self) -> float:
        return round(self.macd.score + self.rsi.score + self.ma.score + self.bollinger.score, 2)

    @property
    def bullish_share(self) -> Optional[float]:
        total = self.bullish_score + self.bearish_score
        if total == 0:
            return None
        return self.bullish_score / total * 100


class PriceLevels(BaseModel):
    stop_loss: float
    add_more_price: float
    target_price: float
    stop_loss_reason: str = ""
    add_more_reason: str = ""
    target_reason: str = ""


class Holding(BaseModel):
    symbol: str
    quantity: float = 0.0
    buy_price: float = 0.0
    id: Optional[str] = None
    portfolio_id: Optional[str] = None
    current_price: Optional[float] = None
    ai_suggestions: Optional[Dict[str, Any]] = None


class AdviceRecord(BaseModel):
    symbol: str
    action: AdviceAction = 'HOLD'
    confidence: int = Field(default=0, ge=0, le=100)
    target_price: float = 0.0
    stop_loss: float = 0.0
    add_more_price: float = 0.0
    reasoning: str = ""
    technical_signals: TechnicalSignals = Field(default_factory=TechnicalSignals)
    model: str = 'rule-based'
    holding_id: Optional[str] = None


class PortfolioSummary(BaseModel):
    total_holdings: int = 0
    actions_count: Dict[str, int] = Field(default_factory=dict)
    avg_confidence: int = 0
    need_action: int = 0
    high_risk: int = 0
    opportunities: int = 0
    suggestion: str = ""


class NarrativeResult(BaseModel):
    analysis: str
    model: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def is_static(self) -> bool:
        return self.model == 'static-fallback'


# ==================== NARRATIVE CONTEXT ====================

class StockContext(BaseModel):
    """Everything a single-stock narrative is built from."""
    symbol: str
    name: Optional[str] = None
    quote: Quote
    indicators: IndicatorSet
    profile: Optional[CompanyProfile] = None
    holding: Optional[Holding] = None
    news: List[NewsItem] = Field(default_factory=list)


class PortfolioPosition(BaseModel):
    """A holding enriched with its live price and headline indicators."""
    symbol: str
    quantity: float
    buy_price: float
    current_price: float
    rsi: Optional[float] = None
    trend: Optional[str] = None

    @property
    def cost(self) -> float:
        return self.quantity * self.buy_price

    @property
    def value(self) -> float:
        return self.quantity * self.current_price

    @property
    def pnl_percent(self) -> float:
        if not self.buy_price:
            return 0.0
        return (self.current_price - self.buy_price) / self.buy_price * 100


class StockOverview(BaseModel):
    """Quote, sentinel-safe profile and indicator snapshot for one symbol."""
    symbol: str
    name: str
    quote: Quote
    profile: CompanyProfile
    indicators: IndicatorSet


# ==================== PERSISTENCE ====================

class Portfolio(BaseModel):
    id: str
    name: str = ""
    user_id: Optional[str] = None


class AnalysisRecord(BaseModel):
    """One saved narrative, keyed by user and by portfolio or holding."""
    id: Optional[str] = None
    user_id: str
    analysis_type: Literal['stock', 'portfolio']
    analysis_data: Dict[str, Any] = Field(default_factory=dict)
    portfolio_id: Optional[str] = None
    holding_id: Optional[str] = None
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
