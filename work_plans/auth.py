"""Access token lookup for the work-plan backend."""

from __future__ import annotations

import logging
import os

TOKEN_ENV = "WORK_PLANS_ACCESS_TOKEN"


def acquire_token() -> str:
    token = os.getenv(TOKEN_ENV)
    if token:
        logging.debug("Using access token from %s", TOKEN_ENV)
        return token
    raise RuntimeError(f"Could not obtain access token (set {TOKEN_ENV})")
