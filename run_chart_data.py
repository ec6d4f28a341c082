"""
Portfolio Technical Advisor - Chart Data
Prints daily candles with aligned MA50 / MA200 / MACD values for one symbol.
"""

import sys
import os
import argparse

# Add project root to path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from config.constants import CHART_PERIOD_DAYS, DEFAULT_CHART_PERIOD
from analysis.stock.stock_service import StockService
from utils.console_utils import symbol as sym, print_header, print_envelope
from utils.errors import MarketDataError
from utils.logger import setup_logger, set_logging_mode, LoggingContext
from utils.report_utils import format_chart_report

logger = setup_logger('run_chart_data')


def main(argv=None):
    parser = argparse.ArgumentParser(description='Candles with aligned technical indicators')
    parser.add_argument('symbol', help='Stock symbol (e.g. AAPL)')
    parser.add_argument('--period', choices=sorted(CHART_PERIOD_DAYS), default=DEFAULT_CHART_PERIOD,
                        help='History window')
    parser.add_argument('--rows', type=int, default=10, help='Most recent rows to print')
    parser.add_argument('--json', action='store_true', help='Print the full payload as a JSON envelope')
    args = parser.parse_args(argv)

    set_logging_mode(LoggingContext.PIPELINE_QUIET if args.json else LoggingContext.ORCHESTRATED)
    symbol = args.symbol.strip().upper()

    try:
        chart = StockService().get_chart_data(symbol, args.period)
    except MarketDataError as e:
        logger.error(f"Chart data for {symbol} failed: {e}")
        if args.json:
            print_envelope(error=str(e))
        else:
            print(f"{sym.FAIL} {e}")
        return 1

    if args.json:
        print_envelope(chart)
    else:
        print_header(f"CHART DATA: {symbol}")
        print(format_chart_report(chart, tail=args.rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
