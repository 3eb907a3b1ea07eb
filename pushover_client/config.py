"""Environment driven configuration."""

from __future__ import annotations

import os
from typing import Dict

TOKEN_ENV = "PUSHOVER_TOKEN"
USER_KEY_ENV = "PUSHOVER_USER_KEY"
BASE_URL_ENV = "PUSHOVER_BASE_URL"

DEFAULT_TIMEOUT = float(os.getenv("PUSHOVER_TIMEOUT", "10"))


def options_from_env() -> Dict[str, str]:
    """Build client options from ``PUSHOVER_*`` environment variables.

    Unset variables are left out so that client validation reports them.
    """

    options: Dict[str, str] = {}
    for key, env in (
        ("token", TOKEN_ENV),
        ("user_key", USER_KEY_ENV),
        ("base_url", BASE_URL_ENV),
    ):
        value = os.getenv(env)
        if value is not None:
            options[key] = value
    return options
