"""
Search Session - Runs ranking passes off the caller's thread.

Every submitted query gets a monotonically increasing version. Passes may
finish out of order; a pass only publishes its results if its version is
still the latest submitted one and no newer pass has already published.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace

from loguru import logger

from quicksearch.search.router import QueryRouter
from quicksearch.services.state import SearchUiState, UiStateStore


class SearchSession:
    """Version-tagged query execution publishing into UiStateStore."""

    def __init__(self, router: QueryRouter, ui_state: UiStateStore, max_workers: int = 2):
        self.router = router
        self.ui_state = ui_state
        self._lock = threading.Lock()
        self._latest_version = 0
        self._latest_query = ""
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="quicksearch-search",
        )

    @property
    def latest_version(self) -> int:
        return self._latest_version

    def submit(self, query: str) -> Future:
        """
        Start a ranking pass for the query.

        Returns:
            Future resolving to True if the results were published,
            False if they were discarded as stale
        """
        with self._lock:
            self._latest_version += 1
            version = self._latest_version
            self._latest_query = query
        return self._executor.submit(self._run, version, query)

    def resubmit(self) -> Future:
        """Re-run the latest query, e.g. after an item was un-excluded."""
        return self.submit(self._latest_query)

    def _is_current(self, version: int) -> bool:
        with self._lock:
            return version == self._latest_version

    def _run(self, version: int, query: str) -> bool:
        try:
            handler, results = self.router.route(query)
        except Exception:
            logger.exception(f"Search failed for '{query}'")
            handler, results = "none", []

        if not self._is_current(version):
            logger.debug(f"Discarding stale results for '{query}' (v{version})")
            return False

        published = False

        def publish(state: SearchUiState) -> SearchUiState:
            nonlocal published
            if not self._is_current(version) or state.query_version > version:
                return state
            published = True
            return replace(
                state,
                query=query,
                query_version=version,
                handler=handler,
                results=tuple(results),
            )

        self.ui_state.update(publish)
        if not published:
            logger.debug(f"Discarding stale results for '{query}' (v{version})")
        return published

    def close(self) -> None:
        self._executor.shutdown(wait=True)
