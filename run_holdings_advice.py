"""
Portfolio Technical Advisor - Holdings Advice
Batch HOLD / BUY_MORE / REDUCE / SELL advice with price levels for a set of
holdings, plus a portfolio-level summary.

Holdings come from the command line (SYMBOL:QUANTITY:BUY_PRICE), a JSON file,
or a stored portfolio (advice is then saved on each holding).
"""

import sys
import os
import argparse
import json
from typing import List

# Add project root to path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from analysis.stock.stock_service import StockService
from analysis.portfolio.holdings_advisor import HoldingsAdvisor
from analysis.portfolio.portfolio_service import PortfolioService, PortfolioNotFoundError
from analysis.portfolio.repository import JsonFileRepository
from utils.console_utils import symbol as sym, print_header, print_envelope
from utils.logger import setup_logger, set_logging_mode, LoggingContext
from utils.report_utils import format_advice_report
from utils.unified_schema import Holding

logger = setup_logger('run_holdings_advice')


def parse_holding(text: str) -> Holding:
    """'AAPL:10:150.5' -> Holding. Quantity and price are optional."""
    parts = text.split(':')
    try:
        quantity = float(parts[1]) if len(parts) > 1 and parts[1] else 0.0
        buy_price = float(parts[2]) if len(parts) > 2 and parts[2] else 0.0
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid holding '{text}', expected SYMBOL:QUANTITY:BUY_PRICE")
    return Holding(symbol=parts[0].strip().upper(), quantity=quantity, buy_price=buy_price)


def load_holdings_file(path: str) -> List[Holding]:
    with open(path, 'r', encoding='utf-8') as f:
        rows = json.load(f)
    return [Holding(**row) for row in rows]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Batch holding advice')
    parser.add_argument('holdings', nargs='*', type=parse_holding, help='SYMBOL:QUANTITY:BUY_PRICE')
    parser.add_argument('--file', '-f', help='JSON list of holdings')
    parser.add_argument('--portfolio', metavar='ID', help='Advise a stored portfolio and save the advice')
    parser.add_argument('--json', action='store_true', help='Print a JSON envelope instead of a report')
    args = parser.parse_args(argv)

    set_logging_mode(LoggingContext.PIPELINE_QUIET if args.json else LoggingContext.SILENT)

    service = StockService()
    try:
        if args.portfolio:
            portfolio_service = PortfolioService(service, JsonFileRepository())
            advice, summary = portfolio_service.advise_portfolio(args.portfolio)
        else:
            holdings = list(args.holdings)
            if args.file:
                holdings.extend(load_holdings_file(args.file))
            if not holdings:
                message = "Provide holdings, --file or --portfolio"
                if args.json:
                    print_envelope(error=message)
                else:
                    print(f"{sym.FAIL} {message}")
                return 1
            advisor = HoldingsAdvisor(service)
            advice = advisor.advise(holdings)
            summary = advisor.summarize(advice)
    except (PortfolioNotFoundError, OSError, ValueError) as e:
        logger.error(f"Holdings advice failed: {e}")
        if args.json:
            print_envelope(error=str(e))
        else:
            print(f"{sym.FAIL} {e}")
        return 1

    if args.json:
        print_envelope({'advice': advice, 'summary': summary})
    else:
        print_header(f"HOLDINGS ADVICE ({len(advice)} holdings)")
        print(format_advice_report(advice, summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
