# =============================================================================
# core/pagination.py  —  Pagination / Dedup Engine
# =============================================================================
#
# THE PROBLEM:
#   Several read tools must answer "all workflows matching ANY of these
#   criteria", but n8n returns bounded pages and filters by ONE criterion
#   per request.
#
# THE ALGORITHM:
#   1. For each criterion, page through GET /workflows with that criterion
#      as the server-side filter, passing each page's cursor back verbatim.
#   2. Every record is looked up by id in a MatchAccumulator:
#        - first sighting  → stored with [reason]
#        - seen before     → reason appended (discovery order kept)
#   3. Once every criterion is exhausted the matches are emitted in
#      first-discovered order.  No re-sorting.
#   4. A caller-supplied limit truncates only AFTER full aggregation.
#
# TERMINATION:
#   A page sequence stops when n8n returns no cursor.  A cursor that repeats,
#   or a sequence longer than `max_pages`, raises PaginationExhausted.
#
#   Pages are fetched strictly one after another; a cursor is only known
#   once the previous page has arrived.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Optional

from core.errors import PaginationExhausted
from core.models import WorkflowPage, WorkflowRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 1000
DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True)
class Criterion:
    """One server-side filter plus the reason recorded when it matches.

    `accepts` is an optional local predicate applied to each fetched record;
    records it rejects are skipped.  It is how heuristic criteria are
    expressed on top of an unfiltered listing.
    """

    reason: str
    filters: dict[str, Any] = field(default_factory=dict)
    accepts: Optional[Callable[[WorkflowRecord], bool]] = None

    @classmethod
    def tag(cls, name: str) -> "Criterion":
        return cls(reason=f"Tag: {name}", filters={"tags": name})

    @classmethod
    def project(cls, project_id: str, label: Optional[str] = None) -> "Criterion":
        return cls(
            reason=f"Project {label or project_id}",
            filters={"project_id": project_id},
        )


@dataclass
class Match:
    """A workflow and every reason it was included."""

    record: WorkflowRecord
    reasons: list[str] = field(default_factory=list)

    @property
    def match_reason(self) -> str:
        return ", ".join(self.reasons)

    def to_summary(self) -> dict[str, Any]:
        summary = self.record.to_summary()
        summary["match_reason"] = self.match_reason
        return summary


class MatchAccumulator:
    """Dedup Accumulator: workflow id → Match, in insertion order."""

    def __init__(self) -> None:
        self._matches: dict[str, Match] = {}

    def add(self, record: WorkflowRecord, reason: str) -> None:
        match = self._matches.get(record.id)
        if match is None:
            self._matches[record.id] = Match(record=record, reasons=[reason])
        elif reason not in match.reasons:
            match.reasons.append(reason)

    def matches(self) -> list[Match]:
        return list(self._matches.values())

    def __len__(self) -> int:
        return len(self._matches)

    def __contains__(self, workflow_id: str) -> bool:
        return workflow_id in self._matches


async def iterate_pages(
    client,
    filters: dict[str, Any],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> AsyncIterator[WorkflowPage]:
    """Yield successive pages of `client.get_workflows(**filters)`."""
    cursor = None
    seen: set[str] = set()

    for page_number in range(1, max_pages + 1):
        page = await client.get_workflows(**filters, limit=page_size, cursor=cursor)
        logger.debug(
            "Fetched page %d (%d records) for filters %r",
            page_number, len(page.data), filters,
        )
        yield page

        if not page.next_cursor:
            return
        if page.next_cursor in seen:
            raise PaginationExhausted(
                f"n8n returned the same cursor twice after {page_number} page(s) "
                f"for filters {filters!r}"
            )
        seen.add(page.next_cursor)
        cursor = page.next_cursor

    raise PaginationExhausted(
        f"Stopped after {max_pages} page(s) for filters {filters!r}; "
        f"n8n kept returning cursors"
    )


async def collect_matches(
    client,
    criteria: list[Criterion],
    *,
    base_filters: Optional[dict[str, Any]] = None,
    limit: Optional[int] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[Match]:
    """Run every criterion to completion and merge the results by id.

    `base_filters` (e.g. ``{"active": True}``) are sent with every request.
    """
    accumulator = MatchAccumulator()

    for criterion in criteria:
        filters = {**(base_filters or {}), **criterion.filters}
        async for page in iterate_pages(
            client, filters, page_size=page_size, max_pages=max_pages
        ):
            for record in page.data:
                if criterion.accepts is not None and not criterion.accepts(record):
                    continue
                accumulator.add(record, criterion.reason)

    matches = accumulator.matches()
    logger.info(
        "Aggregated %d unique workflow(s) across %d criteria",
        len(matches), len(criteria),
    )
    if limit is not None:
        return matches[:limit]
    return matches
