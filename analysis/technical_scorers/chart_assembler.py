"""
Chart Assembler.
Joins a price series with its indicator histories into one row per bar.
A row carries an indicator value only from that indicator's start index on.
"""

from typing import Optional

from utils.unified_schema import (
    PriceSeries, IndicatorHistory, ChartData, ChartRow, ChartSummary
)
from utils.numeric_utils import round_optional


class ChartAssembler:
    """Builds per-day chart rows and a summary block."""

    def assemble(
        self,
        series: PriceSeries,
        sma50_history: IndicatorHistory,
        sma200_history: IndicatorHistory,
        macd_history: IndicatorHistory,
        period: str = '1y'
    ) -> ChartData:
        rows = []
        for i in range(len(series)):
            macd_point = macd_history.value_at(i)
            rows.append(ChartRow(
                date=series.iso_date(i),
                timestamp=series.timestamps[i],
                open=round(series.open[i], 2),
                high=round(series.high[i], 2),
                low=round(series.low[i], 2),
                close=round(series.close[i], 2),
                volume=series.volume[i],
                sma50=round_optional(sma50_history.value_at(i)),
                sma200=round_optional(sma200_history.value_at(i)),
                macd=round(macd_point.macd, 4) if macd_point else None,
                signal=round(macd_point.signal, 4) if macd_point else None,
                histogram=round(macd_point.histogram, 4) if macd_point else None,
            ))

        return ChartData(
            symbol=series.symbol,
            period=period,
            data_points=len(rows),
            rows=rows,
            summary=self._summarize(series, sma50_history, sma200_history, macd_history),
        )

    def _summarize(
        self,
        series: PriceSeries,
        sma50_history: IndicatorHistory,
        sma200_history: IndicatorHistory,
        macd_history: IndicatorHistory
    ) -> ChartSummary:
        if series.is_empty:
            return ChartSummary()

        first_date: Optional[str] = series.iso_date(0)
        last_date: Optional[str] = series.iso_date(len(series) - 1)
        return ChartSummary(
            first_date=first_date,
            last_date=last_date,
            highest_price=round(max(series.high), 2),
            lowest_price=round(min(series.low), 2),
            average_volume=int(round(sum(series.volume) / len(series))),
            sma50_points=len(sma50_history.values),
            sma200_points=len(sma200_history.values),
            macd_points=len(macd_history.values),
        )
