"""Input validation for client options and notification messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .constants import EMERGENCY, PRIORITIES, SOUNDS
from .schemas import NotificationPayload

logger = logging.getLogger(__name__)

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str
    required: bool = False


CLIENT_OPTION_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("token", STRING, required=True),
    FieldSpec("user_key", STRING, required=True),
    FieldSpec("base_url", STRING),
)

MESSAGE_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("message", STRING, required=True),
    FieldSpec("url", STRING),
    FieldSpec("title", STRING),
    FieldSpec("url_title", STRING),
    FieldSpec("callback", STRING),
    FieldSpec("sound", STRING),
    FieldSpec("retry", NUMBER),
    FieldSpec("expire", NUMBER),
    FieldSpec("timestamp", NUMBER),
    FieldSpec("html", BOOLEAN),
    FieldSpec("monospace", BOOLEAN),
)

_E_REQUIRED = "`{ns}.{name}` is required"
_E_TYPE = "invalid `{ns}.{name}` type (expected: {kind}, got: {got})"
_E_EMPTY = "`{ns}.{name}` cannot be empty"


def _matches_kind(value: Any, kind: str) -> bool:
    if kind == STRING:
        return isinstance(value, str)
    if kind == BOOLEAN:
        return isinstance(value, bool)
    if kind == NUMBER:
        # bool is an int subclass but never a valid number here
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    raise ValueError(f"unknown field kind: {kind}")


def check_fields(
    namespace: str, specs: Sequence[FieldSpec], candidate: Mapping[str, Any]
) -> Optional[str]:
    """Check ``candidate`` against ``specs`` and report every violation.

    Unlike the cross-field message rules this does not stop at the first
    problem: all messages are collected in declaration order and joined with
    newlines. ``None`` means the candidate passed.
    """

    problems: List[str] = []
    for spec in specs:
        value = candidate.get(spec.name)
        if value is None:
            if spec.required:
                problems.append(_E_REQUIRED.format(ns=namespace, name=spec.name))
            continue
        if not _matches_kind(value, spec.kind):
            problems.append(
                _E_TYPE.format(
                    ns=namespace,
                    name=spec.name,
                    kind=spec.kind,
                    got=type(value).__name__,
                )
            )
            continue
        if spec.kind == STRING and value == "":
            problems.append(_E_EMPTY.format(ns=namespace, name=spec.name))

    if problems:
        return "\n".join(problems)
    return None


def validate_client_options(options: Any) -> Optional[str]:
    if not isinstance(options, Mapping):
        return f"invalid client options type: {type(options).__name__}"
    return check_fields("opts", CLIENT_OPTION_FIELDS, options)


def _is_device(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, (list, tuple)) and all(
        isinstance(item, str) for item in value
    )


def _format_device(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # Device names containing commas are not escaped.
    return ",".join(value)


def _resolve_priority(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return PRIORITIES.get(value)


def _present(msg: Mapping[str, Any], name: str) -> bool:
    return msg.get(name) is not None


def validate_message(
    msg: Any,
) -> Tuple[Optional[NotificationPayload], Optional[str]]:
    """Validate raw message input and normalize it into a request payload.

    ``msg`` is either a plain string (shorthand for ``{"message": msg}``) or a
    mapping of message fields. Returns ``(payload, None)`` on success and
    ``(None, error)`` otherwise; validation problems are never raised.
    """

    payload, error = _validate(msg)
    if error is not None:
        logger.debug("Rejected notification message: %s", error)
    return payload, error


def _validate(msg: Any) -> Tuple[Optional[NotificationPayload], Optional[str]]:
    if msg is None:
        return None, "message required"

    if isinstance(msg, str):
        msg = {"message": msg}
    elif not isinstance(msg, Mapping):
        return None, f"invalid message type: {type(msg).__name__}"

    error = check_fields("message", MESSAGE_FIELDS, msg)
    if error is not None:
        return None, error

    if _present(msg, "attachment"):
        return None, "`attachment` is not supported"

    if msg.get("html") and msg.get("monospace"):
        return None, "`html` and `monospace` are mutually exclusive"

    if _present(msg, "url_title") and not _present(msg, "url"):
        return None, "`url` is required for `url_title`"

    device = msg.get("device")
    if device is not None and not _is_device(device):
        return None, f"invalid `device` type: {type(device).__name__}"

    priority = None
    if _present(msg, "priority"):
        priority = _resolve_priority(msg["priority"])
        if priority is None:
            return None, f"invalid `priority`: {msg['priority']!r}"

    if any(_present(msg, name) for name in ("retry", "expire", "callback")):
        if priority != EMERGENCY:
            return None, "`retry`/`expire`/`callback` only allowed for emergency messages"

    sound = msg.get("sound")
    if sound is not None and sound not in SOUNDS:
        return None, f"invalid `message.sound`: {sound!r}"

    payload = NotificationPayload(
        message=msg["message"],
        title=msg.get("title"),
        url=msg.get("url"),
        url_title=msg.get("url_title"),
        priority=priority,
        device=_format_device(device),
        sound=sound,
        timestamp=msg.get("timestamp"),
        html=1 if msg.get("html") else None,
        monospace=1 if msg.get("monospace") else None,
        retry=msg.get("retry"),
        expire=msg.get("expire"),
        callback=msg.get("callback"),
    )
    return payload, None
