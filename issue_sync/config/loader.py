from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ColumnNames, GitHubConfig, SmtpConfig, StatusValues, SyncConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/sync.yml by default)
- Validate against the packaged JSON schema (config_schema.json)
- Apply defaults for every optional key
- Overlay secrets from the environment (GITHUB_TOKEN, SMTP_USER, SMTP_PASSWORD)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/sync.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails schema validation (missing required keys, wrong
            types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _env(name: str) -> str | None:
    # 空文字は未設定扱い
    value = os.getenv(name)
    return value if value else None


def load_config(path: Path) -> SyncConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    gh_raw = data.get("github", {})
    smtp_raw = data.get("smtp", {})
    github = GitHubConfig(
        enable_mock_answer=gh_raw.get("enable_mock_answer", False),
        api_base_url=gh_raw.get("api_base_url", "https://api.github.com").rstrip("/"),
        timeout_sec=float(gh_raw.get("timeout_sec", 30)),
        token=_env("GITHUB_TOKEN"),
    )
    smtp = SmtpConfig(
        host=smtp_raw.get("host", "localhost"),
        port=smtp_raw.get("port", 25),
        sender=smtp_raw.get("sender", "issue-sync@localhost"),
        use_tls=smtp_raw.get("use_tls", False),
        user=_env("SMTP_USER"),
        password=_env("SMTP_PASSWORD"),
    )
    return SyncConfig(
        workbook_path=data["workbook_path"],
        sheet_name=data.get("sheet_name", "Requirements"),
        container_url=data.get("container_url"),
        max_rows_per_batch=data.get("max_rows_per_batch", 1000),
        delay_between_rows_ms=data.get("delay_between_rows_ms", 0),
        email_notifications_enabled=data.get("email_notifications_enabled", True),
        update_mode=data.get("update_mode", "status"),
        column_names=ColumnNames(**data.get("column_names", {})),
        status_values=StatusValues(**data.get("status_values", {})),
        github=github,
        smtp=smtp,
    )


def with_mock_answer(config: SyncConfig, enabled: bool = True) -> SyncConfig:
    """Return a copy of ``config`` with the GitHub mock answer switched."""
    return replace(config, github=replace(config.github, enable_mock_answer=enabled))
