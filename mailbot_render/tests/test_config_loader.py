from pathlib import Path

import pytest

from mailbot_render.config_loader import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_COMPLETIONS_API,
    ConfigError,
    RenderConfig,
    WorkersAIBinding,
    config_from_env,
    load_config,
)


def write_file(tmpdir: Path, name: str, content: str) -> None:
    path = tmpdir / name
    path.write_text(content, encoding="utf-8")


def build_sample_config(tmpdir: Path) -> None:
    write_file(
        tmpdir,
        "config.ini",
        """[general]
debug = true
domain = mail.example.com

[summary]
target_lang = german
workers_ai_model = @cf/meta/llama-3-8b-instruct
""",
    )
    write_file(
        tmpdir,
        "keys.ini",
        """[openai]
api_key = sk-test

[cloudflare]
account_id = acc
api_token = key
""",
    )


def test_load_full_config(tmp_path: Path) -> None:
    build_sample_config(tmp_path)
    cfg = load_config(tmp_path)
    assert isinstance(cfg, RenderConfig)
    assert cfg.debug_enabled
    assert cfg.domain == "mail.example.com"
    assert cfg.summary_target_lang == "german"
    assert cfg.openai_api_key == "sk-test"
    assert cfg.workers_ai_binding == WorkersAIBinding("acc", "key")
    assert cfg.has_workers_ai
    assert cfg.openai_chat_model == DEFAULT_CHAT_MODEL


def test_missing_files_raise() -> None:
    with pytest.raises(ConfigError):
        load_config(Path("/nonexistent"))


def test_missing_general_section(tmp_path: Path) -> None:
    write_file(tmp_path, "config.ini", "[summary]\ntarget_lang = french\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_keys_file_is_optional(tmp_path: Path) -> None:
    write_file(tmp_path, "config.ini", "[general]\ndomain = d.io\n")
    cfg = load_config(tmp_path)
    assert not cfg.can_summarize
    assert cfg.workers_ai_binding is None


def test_defaults() -> None:
    cfg = RenderConfig()
    assert cfg.summary_target_lang == "english"
    assert cfg.openai_completions_api == DEFAULT_COMPLETIONS_API
    assert cfg.openai_chat_model == "gpt-4o-mini"
    assert not cfg.debug_enabled


def test_debug_flag_is_literal() -> None:
    assert not RenderConfig(debug="True").debug_enabled
    assert not RenderConfig(debug="1").debug_enabled
    assert RenderConfig(debug="true").debug_enabled


def test_workers_ai_needs_binding_and_model() -> None:
    assert not RenderConfig(workers_ai_model="m").has_workers_ai
    assert not RenderConfig(workers_ai_account_id="a", workers_ai_api_token="t").has_workers_ai
    assert RenderConfig(workers_ai_account_id="a", workers_ai_api_token="t", workers_ai_model="m").has_workers_ai


def test_config_from_env_applies_defaults_for_empty_values() -> None:
    cfg = config_from_env(
        {
            "DEBUG": "true",
            "OPENAI_API_KEY": "sk-1",
            "DOMAIN": "mail.example.com",
            "SUMMARY_TARGET_LANG": "",
            "OPENAI_CHAT_MODEL": "gpt-4.1-mini",
        }
    )
    assert cfg.debug_enabled
    assert cfg.has_openai
    assert cfg.domain == "mail.example.com"
    assert cfg.summary_target_lang == "english"
    assert cfg.openai_chat_model == "gpt-4.1-mini"
    assert cfg.openai_completions_api == DEFAULT_COMPLETIONS_API


def test_config_from_env_keeps_values_as_given() -> None:
    cfg = config_from_env({"DEBUG": " true\n", "DOMAIN": "mail.example.com"})
    assert cfg.debug == " true\n"
    assert not cfg.debug_enabled


def test_config_from_env_blank_values_use_defaults() -> None:
    cfg = config_from_env({"DEBUG": "  ", "SUMMARY_TARGET_LANG": "\n"})
    assert cfg.debug == ""
    assert cfg.summary_target_lang == "english"
