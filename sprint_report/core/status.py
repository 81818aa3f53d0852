"""Status matching helpers used by the filter and the aggregators.

Jira status labels are free text configured per workflow, so every comparison
here is a case-insensitive equality against the labels in config.py
(CANCELLED_STATUS, DONE_STATUS, IN_PROGRESS_STATUS, BLOCKED_STATUS).
"""

from __future__ import annotations

from .config import BLOCKED_STATUS, CANCELLED_STATUS, DONE_STATUS, IN_PROGRESS_STATUS

DONE_BUCKET = "done"
IN_PROGRESS_BUCKET = "in_progress"
BLOCKED_BUCKET = "blocked"

_BUCKETS_LOWER: dict[str, str] = {
    DONE_STATUS.lower(): DONE_BUCKET,
    IN_PROGRESS_STATUS.lower(): IN_PROGRESS_BUCKET,
    BLOCKED_STATUS.lower(): BLOCKED_BUCKET,
}


def is_cancelled_status(value: str | None) -> bool:
    """Check if a status is the terminal-cancellation label.

    Parameters
    ----------
    value : str | None
        Raw status string from Jira.

    Returns
    -------
    bool
        True when ``value`` equals CANCELLED_STATUS ignoring case.

    Examples
    --------
    >>> is_cancelled_status("Cancelado")
    True
    >>> is_cancelled_status("Done")
    False
    """
    if value is None:
        return False
    return str(value).lower() == CANCELLED_STATUS.lower()


def status_bucket(value: str | None) -> str | None:
    """Map a raw status to a single progress bucket, or None if it has none.

    A status belongs to at most one bucket, so an issue never counts as both
    done and in progress.
    """
    if value is None:
        return None
    return _BUCKETS_LOWER.get(str(value).lower())
