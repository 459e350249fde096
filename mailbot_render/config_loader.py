"""Configuration loading utilities for the mail bot renderer.

Settings come either from INI files (``config.ini`` plus an optional
``keys.ini`` holding secrets) or from the process environment. Every
setting is optional; defaults are applied once, here, when the
``RenderConfig`` is built.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

CONFIG_DIR = Path(__file__).resolve().parent / "config"

DEFAULT_TARGET_LANG = "english"
DEFAULT_COMPLETIONS_API = "https://api.openai.com/v1/chat/completions"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"


@dataclass(frozen=True)
class WorkersAIBinding:
    """Cloudflare account credentials used to reach Workers AI."""

    account_id: str
    api_token: str


@dataclass
class RenderConfig:
    """Read-only settings bundle consumed by the renderer."""

    debug: str = ""
    openai_api_key: str = ""
    workers_ai_account_id: str = ""
    workers_ai_api_token: str = ""
    workers_ai_model: str = ""
    domain: str = ""
    summary_target_lang: str = DEFAULT_TARGET_LANG
    openai_completions_api: str = DEFAULT_COMPLETIONS_API
    openai_chat_model: str = DEFAULT_CHAT_MODEL

    @property
    def debug_enabled(self) -> bool:
        return self.debug == "true"

    @property
    def workers_ai_binding(self) -> Optional[WorkersAIBinding]:
        if self.workers_ai_account_id and self.workers_ai_api_token:
            return WorkersAIBinding(self.workers_ai_account_id, self.workers_ai_api_token)
        return None

    @property
    def has_workers_ai(self) -> bool:
        return self.workers_ai_binding is not None and bool(self.workers_ai_model)

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def can_summarize(self) -> bool:
        return self.has_workers_ai or self.has_openai


class ConfigError(Exception):
    """Raised when configuration files are missing or invalid."""


ENV_FIELDS = {
    "DEBUG": "debug",
    "OPENAI_API_KEY": "openai_api_key",
    "CF_ACCOUNT_ID": "workers_ai_account_id",
    "CF_API_TOKEN": "workers_ai_api_token",
    "WORKERS_AI_MODEL": "workers_ai_model",
    "DOMAIN": "domain",
    "SUMMARY_TARGET_LANG": "summary_target_lang",
    "OPENAI_COMPLETIONS_API": "openai_completions_api",
    "OPENAI_CHAT_MODEL": "openai_chat_model",
}


def _read_config_file(path: Path) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
    return parser


def _non_empty(values: Mapping[str, str]) -> dict:
    # Blank strings fall back to the dataclass defaults; other values are kept as given.
    return {key: value for key, value in values.items() if value and value.strip()}


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> RenderConfig:
    """Build a config from environment variables (``DEBUG``, ``DOMAIN``, ...)."""

    env = os.environ if environ is None else environ
    values = {field_name: env.get(env_name, "") for env_name, field_name in ENV_FIELDS.items()}
    return RenderConfig(**_non_empty(values))


def load_config(base_dir: Path = CONFIG_DIR) -> RenderConfig:
    """Load settings from ``config.ini`` and the optional ``keys.ini``.

    Parameters
    ----------
    base_dir:
        Optional base directory override. Defaults to ``mailbot_render/config``.
    """

    parser = _read_config_file(base_dir / "config.ini")
    if "general" not in parser:
        raise ConfigError("[general] section missing in config.ini")

    general = parser["general"]
    values = {
        "debug": general.get("debug", fallback=""),
        "domain": general.get("domain", fallback=""),
    }
    if "summary" in parser:
        summary = parser["summary"]
        values.update(
            summary_target_lang=summary.get("target_lang", fallback=""),
            openai_completions_api=summary.get("openai_completions_api", fallback=""),
            openai_chat_model=summary.get("openai_chat_model", fallback=""),
            workers_ai_model=summary.get("workers_ai_model", fallback=""),
        )

    keys_path = base_dir / "keys.ini"
    if keys_path.exists():
        keys = _read_config_file(keys_path)
        if "openai" in keys:
            values["openai_api_key"] = keys["openai"].get("api_key", fallback="")
        if "cloudflare" in keys:
            cloudflare = keys["cloudflare"]
            values["workers_ai_account_id"] = cloudflare.get("account_id", fallback="")
            values["workers_ai_api_token"] = cloudflare.get("api_token", fallback="")

    return RenderConfig(**_non_empty(values))


__all__ = [
    "ConfigError",
    "DEFAULT_CHAT_MODEL",
    "DEFAULT_COMPLETIONS_API",
    "DEFAULT_TARGET_LANG",
    "RenderConfig",
    "WorkersAIBinding",
    "config_from_env",
    "load_config",
]
