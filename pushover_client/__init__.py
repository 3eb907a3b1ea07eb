"""Client library for sending notifications through the Pushover API."""

from .client import (
    AsyncPushoverClient,
    NotifyResult,
    PushoverClient,
    anew,
    anotify,
    classify_response,
    new,
    notify,
)
from .config import options_from_env
from .constants import PRIORITIES, SOUNDS, __version__
from .errors import NotificationError
from .schemas import MessageResponse, NotificationPayload
from .validation import validate_message

__all__ = [
    "AsyncPushoverClient",
    "MessageResponse",
    "NotificationError",
    "NotificationPayload",
    "NotifyResult",
    "PRIORITIES",
    "PushoverClient",
    "SOUNDS",
    "__version__",
    "anew",
    "anotify",
    "classify_response",
    "new",
    "notify",
    "options_from_env",
    "validate_message",
]
