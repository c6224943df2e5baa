import asyncio
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from loguru import logger

from src.config.settings import settings
from src.models.ranking import RankingFilters, RankingView
from src.models.result import SemanticRecord
from src.normalization.field_resolver import RecordNormalizer
from src.ranking.aggregator import aggregate
from src.ranking.presentation import chart_series, score_series, summarize
from src.ranking.row_filter import filter_records
from src.storage.supabase_client import DataAccessError

Row = Dict[str, Any]
Fetcher = Callable[[RankingFilters], Awaitable[List[Row]]]

MEMO_SIZE = 16


def build_view(
    records: List[SemanticRecord],
    filters: RankingFilters,
    chart_limit: int = 10,
    precision: int = 3,
) -> RankingView:
    """Pure aggregation step: normalized rows + filters -> presentation view."""
    filtered = filter_records(records, filters)
    rankings = aggregate(filtered, filters, precision=precision)
    return RankingView(
        filters=filters,
        rankings=rankings,
        chart=chart_series(rankings, chart_limit),
        series=score_series(rankings, chart_limit),
        summary=summarize(filtered, rankings),
    )


class RankingPipeline:
    """Connects the store fetch and the in-memory aggregation.

    Every refresh takes a new request token. A response that arrives after a
    newer refresh has started is discarded, so a slow stale fetch can never
    overwrite the view of a later filter selection.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        normalizer: Optional[RecordNormalizer] = None,
        chart_limit: Optional[int] = None,
        precision: Optional[int] = None,
    ):
        self.fetcher = fetcher
        self.normalizer = normalizer or RecordNormalizer()
        self.chart_limit = chart_limit or settings.chart_limit
        self.precision = settings.score_precision if precision is None else precision

        self.view: Optional[RankingView] = None
        self._token = 0
        self._generation = 0  # bumps on every successful fetch
        self._fetch_key: Optional[Tuple] = None
        self._records: List[SemanticRecord] = []
        self._memo: "OrderedDict[Tuple[int, RankingFilters], RankingView]" = OrderedDict()
        self._inflight: Optional[asyncio.Task] = None

    def is_current(self, token: int) -> bool:
        return token == self._token

    async def refresh(self, filters: RankingFilters) -> Optional[RankingView]:
        """Fetches (when needed) and aggregates for ``filters``.

        Returns:
            The new view, or None when this request was superseded.
        """
        self._token += 1
        token = self._token

        if self._fetch_key != filters.fetch_key() or self._generation == 0:
            try:
                rows = await self.fetcher(filters)
            except DataAccessError as e:
                if not self.is_current(token):
                    logger.debug(f"Discarding stale fetch error for request {token}.")
                    return None
                logger.error(f"Ranking fetch failed: {e}")
                self._reset()
                self.view = RankingView.failed(filters, str(e))
                return self.view

            if not self.is_current(token):
                logger.debug(
                    f"Discarding stale response for request {token} (current {self._token})."
                )
                return None

            self._records = self.normalizer.normalize(rows)
            self._fetch_key = filters.fetch_key()
            self._generation += 1
            self._memo.clear()
            logger.info(f"Loaded {len(self._records)} result rows (request {token}).")

        self.view = self._aggregate(filters)
        return self.view

    def submit(self, filters: RankingFilters) -> asyncio.Task:
        """Starts a refresh, cancelling any refresh still in flight."""
        if self._inflight is not None and not self._inflight.done():
            logger.debug("Cancelling in-flight ranking refresh.")
            self._inflight.cancel()
        self._inflight = asyncio.ensure_future(self.refresh(filters))
        return self._inflight

    def _aggregate(self, filters: RankingFilters) -> RankingView:
        key = (self._generation, filters)
        cached = self._memo.get(key)
        if cached is not None:
            logger.debug("Reusing memoized ranking view.")
            self._memo.move_to_end(key)
            return cached
        view = build_view(self._records, filters, self.chart_limit, self.precision)
        self._memo[key] = view
        if len(self._memo) > MEMO_SIZE:
            self._memo.popitem(last=False)  # least recently used
        return view

    def _reset(self) -> None:
        self._records = []
        self._fetch_key = None
        self._generation = 0
        self._memo.clear()
