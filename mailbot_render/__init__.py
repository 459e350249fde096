"""Telegram message rendering for the mail bot."""

from mailbot_render.config_loader import ConfigError, RenderConfig, config_from_env, load_config
from mailbot_render.models import Button, EmailRecord, RenderResult
from mailbot_render.render import EmailRenderer, parse_callback

__all__ = [
    "Button",
    "ConfigError",
    "EmailRecord",
    "EmailRenderer",
    "RenderConfig",
    "RenderResult",
    "config_from_env",
    "load_config",
    "parse_callback",
]
