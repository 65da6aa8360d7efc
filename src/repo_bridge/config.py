"""Environment-driven settings."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_ORG = "Blue-Kelpie"
DEFAULT_GIT_HOST = "github.com"
DEFAULT_VISIBILITY = "public"
DEFAULT_LOG_LEVEL = "WARNING"

VISIBILITY_CHOICES = {"public", "private", "internal"}


def _env_value(env: Mapping[str, str], name: str, default: str) -> str:
    """Return the stripped variable, or the default when unset or blank."""
    return (env.get(name) or "").strip() or default


@dataclass(frozen=True)
class BridgeConfig:
    org: str = DEFAULT_ORG
    git_host: str = DEFAULT_GIT_HOST
    visibility: str = DEFAULT_VISIBILITY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        if env is None:
            env = os.environ

        visibility = _env_value(env, "REPO_BRIDGE_VISIBILITY", DEFAULT_VISIBILITY).lower()
        if visibility not in VISIBILITY_CHOICES:
            raise ConfigError(
                f"Invalid REPO_BRIDGE_VISIBILITY '{visibility}'. "
                f"Choose from {', '.join(sorted(VISIBILITY_CHOICES))}."
            )

        log_level = _env_value(env, "REPO_BRIDGE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Invalid REPO_BRIDGE_LOG_LEVEL '{log_level}'.")

        return cls(
            org=_env_value(env, "REPO_BRIDGE_ORG", DEFAULT_ORG),
            git_host=_env_value(env, "REPO_BRIDGE_GIT_HOST", DEFAULT_GIT_HOST),
            visibility=visibility,
            log_level=log_level,
        )

    def clone_url(self, name: str) -> str:
        return f"git@{self.git_host}:{self.org}/{name}.git"
