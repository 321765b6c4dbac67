"""Logging setup for the searchgate CLI.

Indexer API keys end up in log lines through search URLs
(``...&apikey=...``) and error messages, so every handler shares one
formatter that masks them. Keys can be added after startup, once the store
is open and the configured indexers are known.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

from core.diagnostics import VERBOSE

MASK = "***"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_APIKEY_PARAM_RE = re.compile(r"(apikey=)[^&\s\"']+", re.IGNORECASE)


class SecretMaskingFormatter(logging.Formatter):
    """Formatter that hides API keys in query strings and known secret values."""

    def __init__(
        self,
        fmt: str = LOG_FORMAT,
        datefmt: Optional[str] = DATE_FORMAT,
        secrets: Iterable[Optional[str]] = (),
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets: list[str] = []
        self.add_secrets(secrets)

    def add_secrets(self, secrets: Iterable[Optional[str]]) -> None:
        # Longest first so a key containing another key is masked whole.
        merged = set(self._secrets) | {secret for secret in secrets if secret}
        self._secrets = sorted(merged, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = _APIKEY_PARAM_RE.sub(lambda m: m.group(1) + MASK, super().format(record))
        for secret in self._secrets:
            message = message.replace(secret, MASK)
        return message


def resolve_level(name: object) -> int:
    """Map a config level name (VERBOSE included) to a number, INFO if unknown."""

    level_name = str(name or "INFO").upper()
    if level_name == "VERBOSE":
        return VERBOSE
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def env_secrets(redact_cfg: dict) -> list[str]:
    """Values of the environment variables listed under ``redact.patterns``."""

    if not redact_cfg.get("enabled", False):
        return []
    return [os.environ[name] for name in redact_cfg.get("patterns", []) if os.getenv(name)]


def build_handlers(
    config: dict, project_root: str, level: int, formatter: logging.Formatter
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/searchgate.log")
        if not os.path.isabs(path):
            path = os.path.join(project_root, path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: dict, project_root: str) -> Optional[SecretMaskingFormatter]:
    """Install handlers from the ``logging`` config section.

    Returns the shared formatter so callers can register more secrets, or
    None when logging is disabled or has no handlers.
    """

    if not config or not config.get("enabled", False):
        return None

    level = resolve_level(config.get("level", "INFO"))
    formatter = SecretMaskingFormatter(secrets=env_secrets(config.get("redact", {})))
    handlers = build_handlers(config, project_root, level, formatter)
    if not handlers:
        return None

    logging.basicConfig(level=level, handlers=handlers)
    return formatter
