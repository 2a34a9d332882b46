# tax_lookup/state.py
"""Application state for the lookup screen.

``AppState`` is immutable; every change goes through one of the transition
functions below, which return a new state. ``LookupController`` owns the
current state and runs the asynchronous operations (load, search, insight)
that drive those transitions.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence, Tuple

from . import config
from .errors import DataFetchError, MissingApiKeyError
from .insights import AI_FAILURE_MESSAGE, get_tax_insight
from .loader import DatasetStore, compute_stats
from .models import AppMessage, DatasetStats, LoadingState, SearchOutcome, TaxRecord
from .search import search as lookup, search_key
from .session import SessionGate

_LOGGER = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Could not connect to the CSV data server."


@dataclass(frozen=True)
class AppState:
    authenticated: bool = False
    login_error: bool = False
    records: Tuple[TaxRecord, ...] = ()
    # set once the first fetch is tried; later fetches are user-initiated
    load_attempted: bool = False
    loading: LoadingState = LoadingState.IDLE
    search_term: str = ""
    search_result: Optional[TaxRecord] = None
    message: AppMessage = field(default_factory=AppMessage)
    ai_insight: Optional[str] = None
    show_config_alert: bool = False

    @property
    def stats(self) -> DatasetStats:
        return compute_stats(list(self.records))


# ---------------------------------------------------------
# AUTH
# ---------------------------------------------------------
def auth_succeeded(state: AppState) -> AppState:
    return replace(state, authenticated=True, login_error=False)


def auth_failed(state: AppState) -> AppState:
    return replace(state, authenticated=False, login_error=True)


def logged_out(state: AppState) -> AppState:
    return replace(
        state,
        authenticated=False,
        login_error=False,
        search_term="",
        search_result=None,
        ai_insight=None,
        message=AppMessage(),
    )


# ---------------------------------------------------------
# DATASET
# ---------------------------------------------------------
def load_started(state: AppState) -> AppState:
    return replace(state, loading=LoadingState.FETCHING_DATA, load_attempted=True)


def load_succeeded(state: AppState, records: Sequence[TaxRecord]) -> AppState:
    return replace(state, records=tuple(records), loading=LoadingState.IDLE)


def load_failed(state: AppState) -> AppState:
    # previous records stay in place
    return replace(
        state,
        loading=LoadingState.IDLE,
        message=AppMessage.error(CONNECTION_ERROR_MESSAGE),
    )


# ---------------------------------------------------------
# SEARCH
# ---------------------------------------------------------
def search_started(state: AppState, term: str) -> AppState:
    return replace(
        state,
        loading=LoadingState.SEARCHING,
        search_term=term,
        search_result=None,
        ai_insight=None,
        message=AppMessage(),
    )


def search_succeeded(state: AppState, outcome: SearchOutcome) -> AppState:
    return replace(
        state,
        loading=LoadingState.IDLE,
        search_result=outcome.record,
        message=outcome.message,
    )


def search_failed(state: AppState, outcome: SearchOutcome) -> AppState:
    return replace(
        state,
        loading=LoadingState.IDLE,
        search_result=None,
        message=outcome.message,
    )


# ---------------------------------------------------------
# AI INSIGHT
# ---------------------------------------------------------
def insight_started(state: AppState) -> AppState:
    return replace(state, loading=LoadingState.AI_ANALYZING)


def insight_succeeded(state: AppState, text: str) -> AppState:
    return replace(state, loading=LoadingState.IDLE, ai_insight=text)


def insight_failed(state: AppState) -> AppState:
    return replace(state, loading=LoadingState.IDLE, ai_insight=AI_FAILURE_MESSAGE)


def config_error_raised(state: AppState) -> AppState:
    return replace(state, loading=LoadingState.IDLE, show_config_alert=True)


def config_error_dismissed(state: AppState) -> AppState:
    return replace(state, show_config_alert=False)


class LookupController:
    """Runs lookup operations and applies their transitions."""

    def __init__(
        self,
        store: DatasetStore,
        gate: SessionGate,
        search_delay: Optional[float] = None,
        insight_fn: Callable[[TaxRecord], str] = get_tax_insight,
    ) -> None:
        self.store = store
        self.gate = gate
        self.search_delay = (
            config.SEARCH_DELAY_SECONDS if search_delay is None else search_delay
        )
        self.insight_fn = insight_fn
        self.state = AppState(
            authenticated=gate.is_authenticated,
            records=tuple(store.records),
        )
        self._search_generation = 0

    # -- auth ---------------------------------------------------------------
    def login(self, candidate: str) -> AppState:
        if self.gate.authenticate(candidate):
            self.state = auth_succeeded(self.state)
        else:
            self.state = auth_failed(self.state)
        return self.state

    def logout(self) -> AppState:
        self.gate.logout()
        self.state = logged_out(self.state)
        return self.state

    def dismiss_config_alert(self) -> AppState:
        self.state = config_error_dismissed(self.state)
        return self.state

    # -- operations ---------------------------------------------------------
    async def load(self) -> AppState:
        if not self.state.authenticated:
            return self.state

        self.state = load_started(self.state)
        try:
            records = await asyncio.to_thread(self.store.reload)
        except DataFetchError as exc:
            _LOGGER.warning("Dataset load failed: %s", exc)
            self.state = load_failed(self.state)
        else:
            self.state = load_succeeded(self.state, records)
        return self.state

    async def search(self, term: str) -> AppState:
        """Search after a short delay; only the newest search is applied."""
        if not search_key(term):
            return self.state

        self._search_generation += 1
        generation = self._search_generation
        self.state = search_started(self.state, term)

        await asyncio.sleep(self.search_delay)
        if generation != self._search_generation:
            _LOGGER.debug("Dropping superseded search for %r", term)
            return self.state

        outcome = lookup(self.state.records, term)
        if outcome.found:
            self.state = search_succeeded(self.state, outcome)
        else:
            self.state = search_failed(self.state, outcome)
        return self.state

    async def request_insight(self) -> AppState:
        record = self.state.search_result
        if record is None:
            return self.state

        self.state = insight_started(self.state)
        try:
            text = await asyncio.to_thread(self.insight_fn, record)
        except MissingApiKeyError as exc:
            _LOGGER.warning("Insight unavailable: %s", exc)
            self.state = config_error_raised(self.state)
        except Exception as exc:
            _LOGGER.error("Insight request failed: %s", exc, exc_info=True)
            self.state = insight_failed(self.state)
        else:
            self.state = insight_succeeded(self.state, text)
        return self.state
