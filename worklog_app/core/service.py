"""WorklogService: orchestrates issue search, worklog fetching, and normalization."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError

from .config import MAX_SEARCH_RESULTS, WORKLOG_FETCH_MAX_WORKERS, WORKLOG_FETCH_MIN_PARALLEL
from .errors import InvalidRequestError, UpstreamWorklogFetchError
from .jira_client import JiraAPI
from .mappers import map_issue_ref, map_worklog_entry, normalize_worklogs
from .models import IssueRef, RawWorklog, WorklogRequest, WorklogResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


def _quote_jql(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_worklog_jql(authors: Sequence[str], window_days: int) -> str:
    """JQL selecting issues where any author logged work in the trailing window."""
    if not authors:
        raise InvalidRequestError("At least one username is required")
    if window_days <= 0:
        raise InvalidRequestError(f"days must be a positive integer, got {window_days!r}")
    names = ", ".join(_quote_jql(a) for a in authors)
    return f"worklogAuthor in ({names}) AND worklogDate >= -{window_days}d"


class WorklogService:
    def __init__(
        self,
        api: JiraAPI,
        *,
        max_workers: int = WORKLOG_FETCH_MAX_WORKERS,
        min_parallel: int = WORKLOG_FETCH_MIN_PARALLEL,
    ):
        self.api = api
        self.max_workers = max_workers
        self.min_parallel = min_parallel

    # ------------------ Issue Search ------------------
    def search_issues(self, authors: Sequence[str], window_days: int) -> list[IssueRef]:
        """Resolve the issues on which any of ``authors`` logged work recently.

        Raises ``InvalidRequestError`` before any network call when ``authors``
        is empty; upstream failures propagate as ``UpstreamSearchError``.
        """
        jql = build_worklog_jql(list(authors), window_days)
        logger.debug("Searching issues: %s", jql)
        raw = self.api.search_issues(jql, max_results=MAX_SEARCH_RESULTS)
        issues = [ref for ref in (map_issue_ref(r) for r in raw) if ref is not None]
        logger.info("Search matched %d issue(s) for %d author(s)", len(issues), len(authors))
        return issues

    # ------------------ Worklog Fetch ------------------
    def fetch_worklogs(
        self,
        issues: Sequence[IssueRef],
        authors: Iterable[str],
        *,
        deadline: float | None = None,
        progress: ProgressCallback | None = None,
    ) -> dict[str, list[RawWorklog]]:
        """Fetch and author-filter worklogs for every issue.

        Returns a mapping ordered like ``issues``. Issues whose fetch failed,
        or did not finish within ``deadline`` seconds, are absent.
        """
        wanted = frozenset(a.lower() for a in authors)
        if not issues:
            return {}
        total = len(issues)
        if progress:
            progress("Loading worklogs", 0, total)

        if len(issues) < self.min_parallel:
            results = self._fetch_sequential(issues, wanted, deadline=deadline, progress=progress)
        else:
            results = self._fetch_parallel(issues, wanted, deadline=deadline, progress=progress)

        # Merge by search order so concurrency never reorders the output.
        ordered = {issue.key: results[issue.key] for issue in issues if issue.key in results}
        skipped = total - len(ordered)
        if skipped:
            logger.info("Skipped %d of %d issue(s) while fetching worklogs", skipped, total)
        return ordered

    def _fetch_sequential(
        self,
        issues: Sequence[IssueRef],
        wanted: frozenset[str],
        *,
        deadline: float | None,
        progress: ProgressCallback | None,
    ) -> dict[str, list[RawWorklog]]:
        results: dict[str, list[RawWorklog]] = {}
        started_at = time.monotonic()
        for idx, issue in enumerate(issues, start=1):
            if deadline is not None and time.monotonic() - started_at >= deadline:
                remaining = [i.key for i in issues[idx - 1 :]]
                logger.warning("Worklog deadline reached; skipping %s", ", ".join(remaining))
                break
            try:
                matched = self._fetch_issue(issue.key, wanted)
            except UpstreamWorklogFetchError as exc:
                logger.warning("Skipping %s: %s", issue.key, exc)
            else:
                # A fetch that finishes after the deadline counts as not finished.
                if deadline is not None and time.monotonic() - started_at > deadline:
                    logger.warning("Worklog deadline reached; skipping %s", issue.key)
                else:
                    results[issue.key] = matched
            if progress:
                progress("Loading worklogs", idx, len(issues))
        return results

    def _fetch_parallel(
        self,
        issues: Sequence[IssueRef],
        wanted: frozenset[str],
        *,
        deadline: float | None,
        progress: ProgressCallback | None,
    ) -> dict[str, list[RawWorklog]]:
        results: dict[str, list[RawWorklog]] = {}
        completed = 0
        pool = ThreadPoolExecutor(max_workers=self.max_workers)
        futures = {pool.submit(self._fetch_issue, issue.key, wanted): issue.key for issue in issues}
        try:
            for fut in as_completed(futures, timeout=deadline):
                key = futures[fut]
                try:
                    results[key] = fut.result()
                except UpstreamWorklogFetchError as exc:
                    logger.warning("Skipping %s: %s", key, exc)
                finally:
                    completed += 1
                    if progress:
                        progress("Loading worklogs", completed, len(issues))
        except FuturesTimeoutError:
            pending = [key for fut, key in futures.items() if key not in results and not fut.done()]
            logger.warning("Worklog deadline reached; skipping %s", ", ".join(pending))
        finally:
            # Never block on stragglers past the deadline.
            pool.shutdown(wait=False, cancel_futures=True)
        return results

    def _fetch_issue(self, issue_key: str, wanted: frozenset[str]) -> list[RawWorklog]:
        entries = self.api.fetch_worklogs(issue_key)
        matched: list[RawWorklog] = []
        for raw in entries:
            entry = map_worklog_entry(raw) if isinstance(raw, dict) else None
            if entry is None:
                logger.debug("Ignoring malformed worklog entry on %s", issue_key)
                continue
            if entry.author.lower() in wanted:
                matched.append(entry)
        logger.debug("%s: %d of %d worklog(s) matched", issue_key, len(matched), len(entries))
        return matched

    # ------------------ Pipeline ------------------
    def fetch(
        self,
        request: WorklogRequest,
        *,
        deadline: float | None = None,
        progress: ProgressCallback | None = None,
    ) -> WorklogResult:
        if progress:
            progress("Searching issues with logged work", None, None)
        issues = self.search_issues(request.usernames, request.days)
        raw_by_issue = self.fetch_worklogs(issues, request.usernames, deadline=deadline, progress=progress)
        records, ticket_info = normalize_worklogs(issues, raw_by_issue)
        logger.info("Collected %d worklog(s) across %d ticket(s)", len(records), len(ticket_info))
        return WorklogResult(worklogs=records, ticket_info=ticket_info, usernames=list(request.usernames))

    def fetch_payload(self, payload, *, deadline: float | None = None) -> dict:
        """Validate an inbound JSON payload and return the outbound JSON shape."""
        request = WorklogRequest.from_payload(payload)
        return self.fetch(request, deadline=deadline).to_dict()
