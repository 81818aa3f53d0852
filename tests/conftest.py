"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import sprint_report` works.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def make_issue(issue_id, status, assignee=None, seconds=None, account_id=None, avatar=None):
    """Build a raw Jira issue record as returned by the Agile sprint endpoint."""
    fields = {"status": {"name": status}, "assignee": None}
    if assignee is not None:
        fields["assignee"] = {
            "accountId": account_id or f"acc-{assignee}",
            "displayName": assignee,
            "avatarUrls": {"48x48": avatar or f"https://avatars.example/{assignee}.png"},
        }
    if seconds is not None:
        fields["timetracking"] = {"timeSpentSeconds": seconds}
    return {"id": str(issue_id), "key": f"SPR-{issue_id}", "fields": fields}


@pytest.fixture
def issue_factory():
    return make_issue
