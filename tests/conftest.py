"""Shared test helpers: canned GitHub payloads and an in-memory API client."""

from __future__ import annotations

import json
from typing import Any


def views_payload(*days: str, per_day: int = 10) -> dict[str, Any]:
    views = [
        {"timestamp": f"{day}T00:00:00Z", "count": per_day, "uniques": per_day // 2}
        for day in days
    ]
    return {
        "count": per_day * len(days),
        "uniques": (per_day // 2) * len(days),
        "views": views,
    }


def clones_payload(*days: str, per_day: int = 4) -> dict[str, Any]:
    data = views_payload(*days, per_day=per_day)
    data["clones"] = data.pop("views")
    return data


REPO_PAYLOAD: dict[str, Any] = {
    "id": 1296269,
    "full_name": "octocat/Hello-World",
    "forks_count": 9,
    "stargazers_count": 80,
    "watchers_count": 80,
    "open_issues_count": 0,
    "subscribers_count": 42,
    "has_wiki": True,
    "archived": False,
    "has_projects": True,
    "size": 108,
    "topics": ["octocat", "api"],
    "license": {"key": "mit", "name": "MIT License", "spdx_id": "MIT"},
    "default_branch": "master",
}


class FakeClient:
    """Serves canned bodies by API path; an Exception value is raised instead."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    async def fetch(self, path: str) -> bytes:
        self.calls.append(path)
        response = self.responses[path]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, bytes):
            return response
        return json.dumps(response).encode()
