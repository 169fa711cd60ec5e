"""
Coordinator settings from environment (and .env, via python-dotenv).

- COORDINATOR_ADMIN_ID: owner identity; always authorized, cannot be revoked (default "admin").
- COORDINATOR_STATUS_POLICY: "permissive" (any status accepted from an assigned responder)
  or "strict" (REPORTED -> ASSIGNED -> IN_PROGRESS -> RESOLVED, CANCELLED from any open status).
- LOG_LEVEL: root logging level (default INFO).
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger("coordinator_api.config")

DEFAULT_ADMIN_ID = "admin"
STATUS_POLICIES = ("permissive", "strict")
DEFAULT_STATUS_POLICY = "permissive"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    admin_id: str = DEFAULT_ADMIN_ID
    status_policy: str = DEFAULT_STATUS_POLICY
    log_level: str = DEFAULT_LOG_LEVEL


def _admin_id() -> str:
    v = os.environ.get("COORDINATOR_ADMIN_ID")
    if v is None or v.strip() == "":
        return DEFAULT_ADMIN_ID
    return v.strip()


def _status_policy() -> str:
    v = os.environ.get("COORDINATOR_STATUS_POLICY")
    if v is None or v.strip() == "":
        return DEFAULT_STATUS_POLICY
    policy = v.strip().lower()
    if policy not in STATUS_POLICIES:
        logger.warning("unknown COORDINATOR_STATUS_POLICY %r; using %s", v, DEFAULT_STATUS_POLICY)
        return DEFAULT_STATUS_POLICY
    return policy


def _log_level() -> str:
    v = os.environ.get("LOG_LEVEL")
    if v is None or v.strip() == "":
        return DEFAULT_LOG_LEVEL
    level = v.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def load_settings(dotenv: bool = True) -> Settings:
    """Read settings from the environment; loads .env first unless dotenv=False."""
    if dotenv:
        load_dotenv(override=False)
    return Settings(admin_id=_admin_id(), status_policy=_status_policy(), log_level=_log_level())
