from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from dotenv import load_dotenv

log = logging.getLogger("redmine_mcp.core.config")

RC_FILENAME = ".redminemcprc.json"
URL_ENV = "REDMINE_URL"
API_KEY_ENV = "REDMINE_API_KEY"


class ConfigError(ValueError):
    """Raised when the resolved configuration is unusable."""


class MissingBaseUrlError(ConfigError):
    """Raised when no Redmine URL was configured."""


class MissingApiKeyError(ConfigError):
    """Raised when no Redmine API key was configured."""


@dataclass(frozen=True)
class RedmineConfig:
    url: str
    api_key: str


def default_rc_paths() -> list[Path]:
    return [Path.home() / RC_FILENAME, Path.cwd() / RC_FILENAME]


def load_config_file(paths: Iterable[Path]) -> Dict[str, str]:
    """Read the first rc file that exists; unreadable files are logged and skipped."""
    for path in paths:
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.error("Error loading config file %s: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            log.error("Config file %s must contain a JSON object", path)
            return {}
        return _normalize_keys(data)
    return {}


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    url = data.get("url")
    api_key = data.get("apiKey", data.get("api_key"))
    if isinstance(url, str) and url.strip():
        out["url"] = url.strip()
    if isinstance(api_key, str) and api_key.strip():
        out["api_key"] = api_key.strip()
    return out


def load_env_config(*, use_dotenv: bool = True) -> Dict[str, str]:
    """Load Redmine URL and API key from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return _normalize_keys(
        {"url": os.getenv(URL_ENV, ""), "api_key": os.getenv(API_KEY_ENV, "")}
    )


def resolve_config(
    *,
    url: Optional[str] = None,
    api_key: Optional[str] = None,
    config_path: Optional[str] = None,
    use_dotenv: bool = True,
    rc_paths: Optional[Iterable[Path]] = None,
) -> RedmineConfig:
    """
    Merge configuration sources, lowest precedence first:
    rc file, environment, then explicit values (an explicit config_path
    file ranks with the explicit values but below url/api_key).
    """
    merged: Dict[str, str] = {}
    if rc_paths is None:
        rc_paths = default_rc_paths()
    merged.update(load_config_file(rc_paths))
    merged.update(load_env_config(use_dotenv=use_dotenv))
    if config_path:
        merged.update(load_config_file([Path(config_path).expanduser()]))
    merged.update(_normalize_keys({"url": url or "", "api_key": api_key or ""}))

    if not merged.get("url"):
        raise MissingBaseUrlError(
            f"Redmine URL is required; use --url, {URL_ENV} or the config file."
        )
    if not merged.get("api_key"):
        raise MissingApiKeyError(
            f"Redmine API key is required; use --api-key, {API_KEY_ENV} "
            "or the config file."
        )
    return RedmineConfig(url=merged["url"], api_key=merged["api_key"])


def create_client_from_env(**kwargs):
    """Create a RedmineClient from rc file + environment."""
    from .client import RedmineClient

    cfg = resolve_config()
    return RedmineClient(base_url=cfg.url, api_key=cfg.api_key, **kwargs)


__all__ = [
    "ConfigError",
    "MissingApiKeyError",
    "MissingBaseUrlError",
    "RedmineConfig",
    "create_client_from_env",
    "default_rc_paths",
    "load_config_file",
    "load_env_config",
    "resolve_config",
]
