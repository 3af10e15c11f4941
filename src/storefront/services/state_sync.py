"""Bidirectional mapping between persisted search parameters and filter state.

The persisted side is a flat string mapping with the names ``q``,
``category``, ``limit`` and ``skip``, the same contract a URL query string
offers. :class:`StateSynchronizer` parses it into a :class:`FilterState`
and funnels every change through a small set of transitions, each of which
writes one complete replacement of the mapping.

Search text and category are mutually exclusive: setting one clears the
other, so after any transition at most one of them is non-empty.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Callable, Protocol
from urllib.parse import parse_qsl, urlencode

from storefront.shared.constants import QueryDefaults, QueryOperationNames, SearchParamNames
from storefront.shared.errors import ErrorCode, StorefrontParsingError, create_parsing_error
from storefront.shared.logging import log_validation_error

logger = logging.getLogger(__name__)

ParamsListener = Callable[[Mapping[str, str]], None]


@dataclass(frozen=True)
class FilterState:
    """Current filter and pagination parameters.

    Attributes:
        search_text: Free text search; empty when not searching
        category: Category slug; empty when not filtering by category
        limit: Page size, always > 0
        skip: Offset of the first product, always >= 0
    """

    search_text: str = QueryDefaults.SEARCH_TEXT
    category: str = QueryDefaults.CATEGORY
    limit: int = QueryDefaults.LIMIT
    skip: int = QueryDefaults.SKIP

    def __post_init__(self) -> None:
        if self.limit <= 0:
            msg = f"limit must be > 0, got {self.limit}"
            raise ValueError(msg)
        if self.skip < 0:
            msg = f"skip must be >= 0, got {self.skip}"
            raise ValueError(msg)

    def to_params(self) -> dict[str, str]:
        """Serialize to the persisted string mapping.

        Empty search text and category are omitted rather than stored as
        empty strings.
        """
        params: dict[str, str] = {}
        if self.search_text:
            params[SearchParamNames.QUERY] = self.search_text
        if self.category:
            params[SearchParamNames.CATEGORY] = self.category
        params[SearchParamNames.LIMIT] = str(self.limit)
        params[SearchParamNames.SKIP] = str(self.skip)
        return params


class SearchParamsStore(Protocol):
    """Persisted key/value state, e.g. the query string of the page URL."""

    def get(self, name: str) -> str | None:
        """Return the value of ``name`` or None when absent."""
        ...

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over all stored parameters."""
        ...

    def replace(self, params: Mapping[str, str]) -> None:
        """Atomically replace every stored parameter with ``params``."""
        ...


class InMemorySearchParams:
    """Search parameter store kept in memory.

    Every replacement is atomic and notifies subscribers with the new
    mapping. Parameters that are not part of the filter contract are
    preserved only until the next replacement.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._params: dict[str, str] = dict(initial or {})
        self._listeners: list[ParamsListener] = []

    @classmethod
    def from_query_string(cls, query: str) -> InMemorySearchParams:
        """Build a store from a URL query string such as ``"q=phone&skip=4"``."""
        return cls(dict(parse_qsl(query.lstrip("?"), keep_blank_values=True)))

    def to_query_string(self) -> str:
        """Render the stored parameters as a URL query string."""
        return urlencode(self._params)

    def get(self, name: str) -> str | None:
        return self._params.get(name)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._params.items()))

    def replace(self, params: Mapping[str, str]) -> None:
        self._params = dict(params)
        snapshot = dict(self._params)
        for listener in list(self._listeners):
            listener(snapshot)

    def subscribe(self, listener: ParamsListener) -> Callable[[], None]:
        """Register a callback run after every replacement.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __repr__(self) -> str:
        return f"InMemorySearchParams({self._params!r})"


def parse_int_param(name: str, raw: str, minimum: int) -> int:
    """Parse one integer search parameter.

    Raises:
        StorefrontParsingError: If ``raw`` is not an integer >= ``minimum``
    """
    try:
        value = int(raw)
    except ValueError as e:
        raise create_parsing_error(
            f"Search parameter '{name}' is not an integer",
            operation=QueryOperationNames.PARSE_FILTER_STATE,
            code=ErrorCode.INVALID_FILTER_STATE,
            additional_data={"parameter": name, "value": raw},
            original_error=e,
        ) from e

    if value < minimum:
        raise create_parsing_error(
            f"Search parameter '{name}' must be >= {minimum}",
            operation=QueryOperationNames.PARSE_FILTER_STATE,
            code=ErrorCode.INVALID_FILTER_STATE,
            additional_data={"parameter": name, "value": raw},
        )
    return value


def _int_or_default(
    params: SearchParamsStore,
    name: str,
    default: int,
    minimum: int,
) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return default

    try:
        return parse_int_param(name, raw, minimum)
    except StorefrontParsingError as e:
        log_validation_error(logger, name, raw, e.message)
        return default


def parse_filter_state(params: SearchParamsStore, default_limit: int = QueryDefaults.LIMIT) -> FilterState:
    """Parse persisted parameters into a filter state.

    Malformed ``limit`` / ``skip`` values are replaced with their defaults
    and logged; they are never raised to the caller. If both ``q`` and
    ``category`` are present (written by something other than this
    module), the category wins and the search text is ignored.

    Args:
        params: Persisted parameter store
        default_limit: Page size when none is stored

    Returns:
        The parsed filter state
    """
    search_text = params.get(SearchParamNames.QUERY) or QueryDefaults.SEARCH_TEXT
    category = params.get(SearchParamNames.CATEGORY) or QueryDefaults.CATEGORY
    if search_text and category:
        log_validation_error(
            logger,
            SearchParamNames.QUERY,
            search_text,
            "search text and category are exclusive; keeping category",
        )
        search_text = QueryDefaults.SEARCH_TEXT

    return FilterState(
        search_text=search_text,
        category=category,
        limit=_int_or_default(params, SearchParamNames.LIMIT, default_limit, minimum=1),
        skip=_int_or_default(params, SearchParamNames.SKIP, QueryDefaults.SKIP, minimum=0),
    )


class StateSynchronizer:
    """Single writer of the persisted filter and pagination state.

    Args:
        params: Persisted parameter store
        default_limit: Page size when none is stored
    """

    def __init__(
        self,
        params: SearchParamsStore | None = None,
        default_limit: int = QueryDefaults.LIMIT,
    ) -> None:
        self.params: SearchParamsStore = params if params is not None else InMemorySearchParams()
        self.default_limit = default_limit

    @property
    def state(self) -> FilterState:
        """The filter state currently described by the persisted parameters."""
        return parse_filter_state(self.params, self.default_limit)

    def set_search_text(self, text: str) -> FilterState:
        """Search for ``text``: back to the first page, category cleared."""
        return self._commit(replace(self.state, search_text=text, category="", skip=0))

    def set_category(self, category: str) -> FilterState:
        """Filter by ``category``: back to the first page, search text cleared."""
        return self._commit(replace(self.state, category=category, search_text="", skip=0))

    def page(self, delta: int) -> FilterState:
        """Move the offset by ``delta``, never below zero."""
        state = self.state
        return self._commit(replace(state, skip=max(state.skip + delta, 0)))

    def next_page(self) -> FilterState:
        """Advance by one page."""
        return self.page(self.state.limit)

    def prev_page(self) -> FilterState:
        """Go back by one page."""
        return self.page(-self.state.limit)

    def reset(self) -> FilterState:
        """Restore the default state."""
        return self._commit(FilterState(limit=self.default_limit))

    def _commit(self, state: FilterState) -> FilterState:
        self.params.replace(state.to_params())
        logger.debug("Filter state updated: %s", state)
        return state
