"""
Configuration loader for tvl_rollup.

Pydantic models validate the settings; `load_settings` merges a YAML file with
environment variables and returns the validated `Settings` object.

- Environment Overrides: any setting can be overridden by an environment
  variable following the nested structure, e.g. `provider.timeout_sec` is
  overridden by `TVL_ROLLUP_PROVIDER__TIMEOUT_SEC`.
- Clear Errors: missing files, YAML parse errors and pydantic
  `ValidationError`s are all wrapped in `ConfigError`.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

ENV_PREFIX = "TVL_ROLLUP"

# --- Custom Exceptions ---

class ConfigError(Exception):
    """Custom exception for configuration-related errors."""
    pass

# --- Pydantic Models for Configuration Sections ---

class ProviderSettings(BaseModel):
    """Remote snapshot API endpoints and client limits."""
    protocol_url: str = "https://api.llama.fi/updatedProtocol"
    hourly_url: str = "https://api.llama.fi/hourly"
    timeout_sec: float = Field(30.0, gt=0)
    rate_limit_rps: float = Field(10.0, gt=0)

    @field_validator('protocol_url', 'hourly_url')
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

class RollupSettings(BaseModel):
    """Aggregation defaults."""
    use_hourly_data: bool = False
    skip_aggregated_tvl: bool = False
    # serialized results at or above this size lose per-chain token series
    max_response_bytes: int = Field(5_800_000, gt=0)

class LoggingSettings(BaseModel):
    level: Literal['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR'] = 'INFO'

    @field_validator('level', mode='before')
    def upper_level(cls, v):
        return str(v).upper()

class Settings(BaseModel):
    """Top-level settings object."""
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    rollup: RollupSettings = Field(default_factory=RollupSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

# --- Loader Functions ---

def _load_config_from_yaml(path: Path) -> Dict[str, Any]:
    """Loads the YAML configuration file."""
    if not path.is_file():
        raise ConfigError(f"Configuration file not found at: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML file at {path}: {e}") from e

def _get_env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    """
    Parses environment variables and converts them into a nested dict.
    e.g., TVL_ROLLUP_PROVIDER__TIMEOUT_SEC becomes
    {'provider': {'timeout_sec': ...}}
    """
    overrides: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix + "_"):
            continue
        parts = key.removeprefix(prefix).strip("_").lower().split("__")

        # JSON for lists, dicts, booleans and numbers; plain strings otherwise
        if (value.startswith('[') and value.endswith(']')) or \
           (value.startswith('{') and value.endswith('}')) or \
           value.lower() in ['true', 'false', 'null'] or \
           value.replace('.', '', 1).isdigit():
            try:
                parsed_value = json.loads(value.lower() if value.lower() in ['true', 'false', 'null'] else value)
            except json.JSONDecodeError:
                parsed_value = value
        else:
            parsed_value = value

        d = overrides
        for part in parts[:-1]:
            d = d.setdefault(part, {})
        d[parts[-1]] = parsed_value
    return overrides

def _merge_configs(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges the override dict into the base dict.
    Overwrites values, dictionaries, and lists.
    """
    for key, value in overrides.items():
        if isinstance(value, dict) and key in base and isinstance(base[key], dict):
            base[key] = _merge_configs(base[key], value)
        else:
            base[key] = value
    return base

def _validate(config: Dict[str, Any]) -> Settings:
    try:
        return Settings.model_validate(config)
    except ValidationError as e:
        error_details = e.errors()
        error_msg = f"Configuration validation failed with {len(error_details)} error(s):\n"
        for error in error_details:
            loc = " -> ".join(map(str, error['loc'])) if error['loc'] else "root"
            error_msg += f"  - Location: {loc}\n    Message: {error['msg']}\n"

        logger.error(error_msg)
        raise ConfigError("Failed to validate settings.") from e

# --- Public API ---

def default_settings() -> Settings:
    """Validated defaults plus environment overrides, without a YAML file."""
    return _validate(_get_env_overrides())

def load_settings(path: str = "settings.yaml") -> Settings:
    """
    Loads, validates, and returns the application settings.

    1. Loads the base configuration from the specified YAML file.
    2. Scans environment variables for overrides (prefixed with "TVL_ROLLUP_").
    3. Merges the environment overrides into the base configuration.
    4. Validates the final configuration against the `Settings` model.

    Raises:
        ConfigError: If the file is not found, cannot be parsed, or if
                     validation fails.
    """
    logger.info("Loading settings from '{}'...", path)

    yaml_config = _load_config_from_yaml(Path(path))
    if not yaml_config:
        raise ConfigError(f"YAML file '{path}' is empty or invalid.")
    if not isinstance(yaml_config, dict):
        raise ConfigError(f"YAML file '{path}' must contain a mapping at the top level.")

    final_config = _merge_configs(yaml_config, _get_env_overrides())
    settings = _validate(final_config)
    logger.success("Settings loaded and validated successfully.")
    return settings
