"""
Portfolio Technical Advisor - Stock & Portfolio Analyzer
Orchestrates the single-stock pipeline:
1. Market Data (quote, profile, news via provider fusion)
2. Technical Indicators
3. AI Commentary (static template when no model answers)

Also runs the portfolio narrative, symbol search and analysis history
against the local portfolio store.
"""

import sys
import os
import argparse
from datetime import datetime

# Add project root to path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from config.constants import DATA_REPORTS
from config.settings import settings
from analysis.stock.stock_service import StockService
from analysis.portfolio.portfolio_service import PortfolioService, PortfolioNotFoundError
from analysis.portfolio.repository import JsonFileRepository
from utils.console_utils import symbol as sym, print_header, print_step, print_envelope
from utils.errors import MarketDataError
from utils.logger import setup_logger, set_logging_mode, LoggingContext
from utils.report_utils import format_overview_report
from utils.unified_schema import Holding

logger = setup_logger('run_analysis')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Stock and portfolio analysis')
    parser.add_argument('symbol', nargs='?', help='Stock symbol (e.g. AAPL)')
    parser.add_argument('--quantity', type=float, help='Shares held, for a holder-specific analysis')
    parser.add_argument('--buy-price', type=float, help='Average cost per share')
    parser.add_argument('--prompt', help='Custom prompt sent to the model instead of the built-in one')
    parser.add_argument('--overview', action='store_true', help='Quote, profile and indicators only (no AI)')
    parser.add_argument('--search', metavar='QUERY', help='Search symbols and exit')
    parser.add_argument('--portfolio', metavar='ID', help='Analyze a stored portfolio')
    parser.add_argument('--user', metavar='ID', help='User id; stored analyses are saved under it')
    parser.add_argument('--history', metavar='USER_ID', help='List saved analyses for a user')
    parser.add_argument('--limit', type=int, default=10, help='History rows to show')
    parser.add_argument('--save', action='store_true', help='Save the narrative under generated_reports/')
    parser.add_argument('--json', action='store_true', help='Print a JSON envelope instead of a report')
    return parser.parse_args(argv)


def save_report(name: str, text: str) -> str:
    report_dir = os.path.join(current_dir, DATA_REPORTS)
    os.makedirs(report_dir, exist_ok=True)
    current_date = datetime.now().strftime("%Y-%m-%d")
    report_path = os.path.join(report_dir, f"ai_analysis_{name}_{current_date}.md")
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(text)
    return report_path


def run_search(service: StockService, query: str, as_json: bool):
    matches = service.search_symbols(query)
    if as_json:
        print_envelope(matches)
        return
    print_header(f"SYMBOL SEARCH: {query}")
    if not matches:
        print(f"  {sym.WARN} No matches.")
    for m in matches:
        print(f"  {m.symbol:<10} {m.name:<40} {m.exchange}")


def run_history(portfolio_service: PortfolioService, user_id: str, limit: int, as_json: bool):
    records = portfolio_service.history(user_id, limit)
    if as_json:
        print_envelope(records)
        return
    print_header(f"ANALYSIS HISTORY: {user_id}")
    for r in records:
        target = r.portfolio_id or r.holding_id or '-'
        print(f"  {r.created_at[:19]}  {r.analysis_type:<10} {target}")


def run_portfolio(portfolio_service: PortfolioService, portfolio_id: str, user_id, save: bool, as_json: bool):
    result = portfolio_service.analyze_portfolio(portfolio_id, user_id)
    if as_json:
        print_envelope(result)
        return
    print_header(f"PORTFOLIO ANALYSIS: {portfolio_id}")
    print(result.analysis)
    print(f"\n  Model: {result.model}")
    if save:
        print(f"  {sym.OK} Saved: {save_report(portfolio_id, result.analysis)}")


def run_stock(service: StockService, args):
    symbol = args.symbol.strip().upper()

    if args.overview:
        overview = service.get_stock_overview(symbol)
        if args.json:
            print_envelope(overview)
        else:
            print_header(f"STOCK OVERVIEW: {symbol}")
            print(format_overview_report(overview))
        return

    holding = None
    if args.quantity is not None and args.buy_price is not None:
        holding = Holding(symbol=symbol, quantity=args.quantity, buy_price=args.buy_price)

    if args.json:
        print_envelope(service.analyze_stock(symbol, holding, args.prompt))
        return

    print_header(f"STOCK ANALYSIS: {symbol}")
    print_step(1, 2, "Market Data & Technical Indicators")
    overview = service.get_stock_overview(symbol)
    print(format_overview_report(overview))

    print_step(2, 2, "AI Commentary Generation")
    result = service.analyze_stock(symbol, holding, args.prompt)
    if result.is_static:
        print(f"  {sym.WARN} No model answered; showing the static analysis.")
    print("\n" + result.analysis)
    print(f"\n  Model: {result.model}")
    if args.save:
        print(f"  {sym.OK} Saved: {save_report(symbol, result.analysis)}")


def main(argv=None):
    args = parse_args(argv)
    set_logging_mode(LoggingContext.PIPELINE_QUIET if args.json else LoggingContext.ORCHESTRATED)

    if not (args.symbol or args.search or args.portfolio or args.history):
        if args.json:
            print_envelope(error="A symbol, --search, --portfolio or --history is required")
            return 1
        args.symbol = input("Enter stock symbol (e.g., AAPL): ").strip().upper()
        if not args.symbol:
            print(f"{sym.FAIL} Symbol is required.")
            return 1

    if 'HUGGINGFACE' in settings.missing_keys:
        logger.warning("HUGGINGFACE_TOKEN not set; narratives will use the static templates")

    service = StockService()
    try:
        if args.search:
            run_search(service, args.search, args.json)
        elif args.history or args.portfolio:
            portfolio_service = PortfolioService(service, JsonFileRepository())
            if args.history:
                run_history(portfolio_service, args.history, args.limit, args.json)
            else:
                run_portfolio(portfolio_service, args.portfolio, args.user, args.save, args.json)
        else:
            run_stock(service, args)
    except (MarketDataError, PortfolioNotFoundError) as e:
        logger.error(f"Analysis failed: {e}")
        if args.json:
            print_envelope(error=str(e))
        else:
            print(f"\n{sym.FAIL} {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[!] Analysis cancelled by user.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
