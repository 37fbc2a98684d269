"""Shipment list state holder for client applications.

``ShipmentsQuery`` keeps the latest page of shipments, its page info,
a loading flag and the last error, and re-issues the list request when
its parameters change.  Requests run on a worker pool, so several may be
in flight at once; only the most recently initiated one is allowed to
update the state (last-request-wins).
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog

from shipments_client.client import GatewayClient, GatewayRequestError

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_SORT = {"field": "createdAt", "direction": "desc"}
FILTER_KEYS = ("status", "carrier", "priority", "type", "search")


def clean_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Keep only the recognised filter keys that carry a value."""
    return {key: filters[key] for key in FILTER_KEYS if filters and filters.get(key)}


class ShipmentsQuery:
    """Observable list of shipments backed by a ``GatewayClient``.

    Construction issues the first request.  ``on_change`` (if given) is
    called, from a worker thread, after every state change.
    """

    def __init__(
        self,
        client: GatewayClient,
        filters: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        executor: Optional[ThreadPoolExecutor] = None,
        on_change: Optional[Callable[[ShipmentsQuery], None]] = None,
    ) -> None:
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="shipments-query"
        )
        self._on_change = on_change
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[Future] = None

        self.filters = clean_filters(filters)
        self.page = page
        self.limit = limit

        self.shipments: List[Dict[str, Any]] = []
        self.page_info: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None

        self.refetch()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_params(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Optional[Future]:
        """Update parameters; a request is issued only if something changed."""
        new_filters = clean_filters(filters) if filters is not None else self.filters
        new_page = page if page is not None else self.page
        new_limit = limit if limit is not None else self.limit
        if (new_filters, new_page, new_limit) == (self.filters, self.page, self.limit):
            return None

        self.filters, self.page, self.limit = new_filters, new_page, new_limit
        return self.refetch()

    def refetch(self) -> Future:
        """Issue the list request with the current parameters."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.loading = True
            self.error = None
            params = (dict(self.filters), self.page, self.limit)

        self._notify()
        future = self._executor.submit(self._run, generation, *params)
        self._latest = future
        return future

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the most recently issued request has finished."""
        if self._latest is not None:
            self._latest.result(timeout=timeout)

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(self, generation: int, filters: Dict[str, Any], page: int, limit: int) -> None:
        connection: Optional[Dict[str, Any]] = None
        error: Optional[str] = None
        try:
            connection = self._client.list_shipments(
                filter=filters or None, sort=DEFAULT_SORT, page=page, limit=limit
            )
        except GatewayRequestError as exc:
            error = exc.message

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "shipments_query.superseded",
                    generation=generation,
                    latest=self._generation,
                )
                return
            if error is not None:
                logger.warning("shipments_query.failed", error=error)
                self.error = error
            else:
                self.shipments = connection["edges"]
                self.page_info = connection["pageInfo"]
            self.loading = False

        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
