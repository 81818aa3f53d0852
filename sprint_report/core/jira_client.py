"""Jira API client wrapper (REST v3 projects + Agile board/sprint endpoints)."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any

from jira import JIRA, JIRAError
from requests import RequestException

from .config import AGILE_PAGE_SIZE, SETTINGS
from .errors import FetchError

logger = logging.getLogger(__name__)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        try:
            self.client = JIRA(
                basic_auth=(email, token), options={"server": self.server, "rest_api_version": "3"}
            )
        except (JIRAError, RequestException) as exc:
            raise FetchError(f"Failed to connect to {self.server}: {exc}") from exc
        # Simple in-memory cache: {(hash): (timestamp, data)}
        self._cache: dict[str, tuple[float, Any]] = {}
        self._cache_ttl = SETTINGS.client_cache_ttl

    def clear_cache(self) -> None:
        """Reset the in-memory request cache."""
        cache = getattr(self, "_cache", None)
        if isinstance(cache, dict):
            cache.clear()

    def _cache_key(self, path: str, params: dict[str, Any]) -> str:
        payload = {"path": path, "params": params}
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        session = getattr(self.client, "_session", None)
        if session is None:
            raise FetchError("JIRA session unavailable")
        params = dict(params or {})
        key = self._cache_key(path, params)
        now = time.time()
        cached = self._cache.get(key)
        if cached and (now - cached[0]) < self._cache_ttl:
            return cached[1]
        try:
            resp = session.get(f"{self.server}{path}", params=params)
        except RequestException as exc:
            raise FetchError(f"Request to {path} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise FetchError(
                f"Request to {path} failed {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from {path}", status_code=resp.status_code) from exc
        if not isinstance(data, dict):
            raise FetchError(
                f"Unexpected payload from {path}: {type(data).__name__}", status_code=resp.status_code
            )
        self._cache[key] = (now, data)
        return data

    def _get_paged(self, path: str, params: dict[str, Any], items_key: str) -> list[dict[str, Any]]:
        """Collect every page of an Agile API listing (startAt / isLast / total)."""
        out: list[dict[str, Any]] = []
        start_at = 0
        while True:
            qp = dict(params, startAt=start_at, maxResults=AGILE_PAGE_SIZE)
            data = self._get_json(path, qp)
            page = data.get(items_key, []) or []
            out.extend(page)
            start_at += len(page)
            total = data.get("total")
            if not page or data.get("isLast") is True or (isinstance(total, int) and start_at >= total):
                break
        return out

    def projects(self) -> list[Any]:
        try:
            return list(self.client.projects())
        except (JIRAError, RequestException) as exc:
            raise FetchError(f"Failed to list projects: {exc}") from exc

    def boards_for_project(self, project_id: str) -> list[dict[str, Any]]:
        return self._get_paged("/rest/agile/1.0/board", {"projectKeyOrId": project_id}, "values")

    def active_sprints(self, board_id: int) -> list[dict[str, Any]]:
        try:
            return self._get_paged(f"/rest/agile/1.0/board/{board_id}/sprint", {"state": "active"}, "values")
        except FetchError as exc:
            # Kanban boards answer 400: "The board does not support sprints"
            if exc.status_code == 400:
                logger.debug("Board %s does not support sprints", board_id)
                return []
            raise

    def sprint_issues(self, sprint_id: int, fields: list[str] | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if fields:
            params["fields"] = ",".join(fields)
        return self._get_paged(f"/rest/agile/1.0/sprint/{sprint_id}/issue", params, "issues")
