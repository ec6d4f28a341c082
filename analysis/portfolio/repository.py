"""
Portfolio Repository
Key-based access to portfolios, holdings and saved analyses.

`PortfolioRepository` is the contract the services depend on;
`JsonFileRepository` keeps one JSON document per table on disk.
"""

import json
import os
import threading
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import settings
from utils.logger import setup_logger
from utils.unified_schema import AdviceRecord, AnalysisRecord, Holding, Portfolio

logger = setup_logger('portfolio_repository')


class PortfolioRepository(ABC):
    """Storage contract for portfolios, holdings and analysis history."""

    @abstractmethod
    def get_portfolio(self, portfolio_id: str) -> Optional[Portfolio]:
        pass

    @abstractmethod
    def list_holdings(self, portfolio_id: str) -> List[Holding]:
        pass

    @abstractmethod
    def get_holding(self, holding_id: str) -> Optional[Holding]:
        pass

    @abstractmethod
    def save_ai_suggestions(self, holding_id: str, advice: AdviceRecord) -> bool:
        """Attach advice to a holding. Returns False when the holding is unknown."""
        pass

    @abstractmethod
    def insert_analysis(self, record: AnalysisRecord) -> AnalysisRecord:
        pass

    @abstractmethod
    def list_analyses(self, user_id: str, limit: int = 10) -> List[AnalysisRecord]:
        """Newest first."""
        pass


class JsonFileRepository(PortfolioRepository):
    """
    Tables stored as `<root>/<table>.json`, each a list of row objects.
    Writes go through a lock; the files are small enough to rewrite whole.
    """

    TABLES = ('portfolios', 'holdings', 'analyses')

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else Path(settings.store_dir)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, table: str) -> Path:
        if table not in self.TABLES:
            raise ValueError(f"Unknown table: {table}")
        return self.root / f"{table}.json"

    def _load(self, table: str) -> List[Dict[str, Any]]:
        path = self._path(table)
        if not path.exists():
            return []
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _dump(self, table: str, rows: List[Dict[str, Any]]) -> None:
        path = self._path(table)
        tmp = path.with_name(path.name + '.tmp')
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
        # readers see either the old table or the new one, never a truncated file
        os.replace(tmp, path)

    # --- Reads ---

    def get_portfolio(self, portfolio_id: str) -> Optional[Portfolio]:
        for row in self._load('portfolios'):
            if row.get('id') == portfolio_id:
                return Portfolio(**row)
        return None

    def list_holdings(self, portfolio_id: str) -> List[Holding]:
        return [Holding(**row) for row in self._load('holdings') if row.get('portfolio_id') == portfolio_id]

    def get_holding(self, holding_id: str) -> Optional[Holding]:
        for row in self._load('holdings'):
            if row.get('id') == holding_id:
                return Holding(**row)
        return None

    def list_analyses(self, user_id: str, limit: int = 10) -> List[AnalysisRecord]:
        rows = [row for row in self._load('analyses') if row.get('user_id') == user_id]
        rows.sort(key=lambda row: row.get('created_at', ''), reverse=True)
        return [AnalysisRecord(**row) for row in rows[:limit]]

    # --- Writes ---

    def add_portfolio(self, portfolio: Portfolio) -> Portfolio:
        with self._lock:
            rows = self._load('portfolios')
            rows.append(portfolio.model_dump())
            self._dump('portfolios', rows)
        return portfolio

    def add_holding(self, holding: Holding) -> Holding:
        if holding.id is None:
            holding = holding.model_copy(update={'id': uuid.uuid4().hex})
        with self._lock:
            rows = self._load('holdings')
            rows.append(holding.model_dump())
            self._dump('holdings', rows)
        return holding

    def save_ai_suggestions(self, holding_id: str, advice: AdviceRecord) -> bool:
        with self._lock:
            rows = self._load('holdings')
            for row in rows:
                if row.get('id') == holding_id:
                    row['ai_suggestions'] = advice.model_dump()
                    self._dump('holdings', rows)
                    return True
        logger.warning(f"Holding {holding_id} not found; advice not saved")
        return False

    def insert_analysis(self, record: AnalysisRecord) -> AnalysisRecord:
        if record.id is None:
            record = record.model_copy(update={'id': uuid.uuid4().hex})
        with self._lock:
            rows = self._load('analyses')
            rows.append(record.model_dump())
            self._dump('analyses', rows)
        return record
