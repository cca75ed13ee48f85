"""Credential resolution for the Fizzy MCP server.

Sources are checked in order and the first one that yields a token wins:

1. ``FIZZY_TOKEN`` / ``FIZZY_URL`` environment variables
2. ``~/.claude/plugins/fizzy/config.json`` (``{"token": ..., "url": ...}``)
3. ``~/.claude/plugins/fizzy/.env`` (``FIZZY_TOKEN=...`` / ``FIZZY_URL=...`` lines)

Resolution is cheap and runs on every tool call, so a token saved after the
server started is picked up without a restart.
"""

import json
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .client import DEFAULT_URL

logger = logging.getLogger(__name__)

TOKEN_ENV = "FIZZY_TOKEN"
URL_ENV = "FIZZY_URL"

ENV_TOKEN_PATTERN = re.compile(r"FIZZY_TOKEN=[\"']?([^\"'\n]+)[\"']?")
ENV_URL_PATTERN = re.compile(r"FIZZY_URL=[\"']?([^\"'\n]+)[\"']?")


@dataclass(frozen=True)
class FizzyConfig:
    """Resolved credentials. ``token`` is None when nothing is configured."""

    token: str | None
    url: str = DEFAULT_URL

    @property
    def is_configured(self) -> bool:
        return bool(self.token)


def config_dir(home: Path | None = None) -> Path:
    """Directory holding the per-user config files."""
    return (home or Path.home()) / ".claude" / "plugins" / "fizzy"


def _from_json_file(path: Path) -> FizzyConfig | None:
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.debug(f"Skipping unreadable config file {path}: {e}")
        return None
    if not isinstance(data, dict) or not data.get("token"):
        return None
    return FizzyConfig(token=data["token"], url=data.get("url") or DEFAULT_URL)


def _from_env_file(path: Path) -> FizzyConfig | None:
    if not path.exists():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Skipping unreadable env file {path}: {e}")
        return None
    token_match = ENV_TOKEN_PATTERN.search(content)
    if not token_match:
        return None
    url_match = ENV_URL_PATTERN.search(content)
    return FizzyConfig(token=token_match.group(1), url=url_match.group(1) if url_match else DEFAULT_URL)


def load_config(environ: Mapping[str, str] | None = None, home: Path | None = None) -> FizzyConfig:
    """
    Resolve the Fizzy token and API URL.

    Args:
        environ: Environment mapping (defaults to os.environ)
        home: Home directory to look for config files in (defaults to Path.home())

    Returns:
        FizzyConfig with token=None when no source provides a token
    """
    if environ is None:
        environ = os.environ

    token = environ.get(TOKEN_ENV)
    if token:
        return FizzyConfig(token=token, url=environ.get(URL_ENV) or DEFAULT_URL)

    directory = config_dir(home)
    for loader, path in ((_from_json_file, directory / "config.json"), (_from_env_file, directory / ".env")):
        config = loader(path)
        if config is not None:
            logger.debug(f"Loaded Fizzy credentials from {path}")
            return config

    return FizzyConfig(token=None)
