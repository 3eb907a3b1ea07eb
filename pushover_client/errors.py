"""Exceptions raised on request by callers who prefer them to result values."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .client import NotifyResult


class NotificationError(RuntimeError):
    """A notification attempt that did not succeed.

    The originating :class:`NotifyResult` is kept on ``result`` so the decoded
    response body (and any ``errors`` reported by the service) stays available.
    """

    def __init__(self, result: "NotifyResult") -> None:
        super().__init__(result.error or "notification failed")
        self.result = result
