"""
Rules configuration (config.json) for the transcript task pipeline.

The file is merged over built-in defaults (the ``rules`` block is merged
key-wise) and validated once at startup. The loaded ``AppConfig`` is passed
into the pipeline by reference.

``autoCreateHighConfidence`` and the ``rules`` lists are part of the schema
and validated, but extraction and routing do not consult them.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_CONFIG: dict[str, Any] = {
    'oversightPerson': '',
    'confidenceThreshold': 0.8,
    'autoCreateHighConfidence': True,
    'rules': {
        'ignorePatterns': ['just thinking out loud', 'maybe we should', 'I wonder if'],
        'alwaysInclude': ['action item', 'todo', 'task', 'follow up', 'will do'],
    },
}


class RulesConfig(BaseModel):
    """Phrase lists for extraction tuning."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    ignore_patterns: list[str] = Field(..., alias='ignorePatterns')
    always_include: list[str] = Field(..., alias='alwaysInclude')


class AppConfig(BaseModel):
    """Validated contents of config.json."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    oversight_person: str = Field(
        ...,
        alias='oversightPerson',
        description='Directory-searchable name or email of the oversight identity',
    )
    confidence_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        alias='confidenceThreshold',
        description='Minimum extraction confidence for auto-creation',
    )
    auto_create_high_confidence: bool = Field(default=True, alias='autoCreateHighConfidence')
    rules: RulesConfig

    @field_validator('oversight_person')
    @classmethod
    def _oversight_person_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('Config must have oversightPerson email')
        return value


def merge_with_defaults(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay a parsed config file on DEFAULT_CONFIG."""
    merged = {**DEFAULT_CONFIG, **raw}
    raw_rules = raw.get('rules')
    merged['rules'] = {
        **DEFAULT_CONFIG['rules'],
        **(raw_rules if isinstance(raw_rules, dict) else {}),
    }
    return merged


def validate_app_config(raw: dict[str, Any]) -> AppConfig:
    """
    Validate an already-merged config dict.

    Raises:
        ConfigError: If any field is missing or out of range
    """
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(
            'Invalid configuration',
            context={'errors': [err['msg'] for err in e.errors()]},
        ) from e


def load_app_config(config_path: str | Path = './config.json') -> AppConfig:
    """
    Load, merge and validate the rules configuration file.

    Args:
        config_path: Path to the JSON config file

    Returns:
        Validated AppConfig

    Raises:
        ConfigError: If the file is missing, is not a JSON object, or fails validation
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        parsed = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {path}", context={'error': str(e)}) from e

    if not isinstance(parsed, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")

    return validate_app_config(merge_with_defaults(parsed))
