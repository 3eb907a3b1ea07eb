"""Static values shared by the client: endpoint, headers and lookup tables."""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Union

__version__ = "0.1.0"

BASE_URL = "https://api.pushover.net/1"
MESSAGES_PATH = "messages.json"

USER_AGENT = f"pushover-client v{__version__} (python-httpx)"

MESSAGE_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "content-type": "application/json",
        "user-agent": USER_AGENT,
    }
)

_PRIORITY_NAMES = {
    "lowest": -2,  # no notification/alert
    "low": -1,  # quiet notification
    "normal": 0,
    "high": 1,  # bypasses quiet hours
    "emergency": 2,  # repeats until acknowledged
}

# Lookups work by name or by numeric value, both resolving to the value.
PRIORITIES: Mapping[Union[str, int], int] = MappingProxyType(
    {**_PRIORITY_NAMES, **{value: value for value in _PRIORITY_NAMES.values()}}
)
EMERGENCY = PRIORITIES["emergency"]

SOUNDS: FrozenSet[str] = frozenset(
    {
        "pushover",  # default
        "bike",
        "bugle",
        "cashregister",
        "classical",
        "cosmic",
        "falling",
        "gamelan",
        "incoming",
        "intermission",
        "magic",
        "mechanical",
        "pianobar",
        "siren",
        "spacealarm",
        "tugboat",
        "alien",
        "climb",
        "persistent",
        "echo",
        "updown",
        "vibrate",
        "none",
    }
)
