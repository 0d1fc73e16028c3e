"""Configuration system for temperature-playground.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (TP_*) -> .env file -> field defaults.

Per-request overrides are applied via resolve_config() which creates a new
config instance without mutating the defaults. Infrastructure fields are
protected from per-request override.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from temperature_playground.exceptions import ConfigValidationError
from temperature_playground.sampling.chooser import GREEDY_THRESHOLD
from temperature_playground.sampling.distribution import TEMPERATURE_FLOOR

# Fields that can be overridden per generation request via extra_args.
# Infrastructure fields (draw source, seed, model serialization) are excluded.
_PER_REQUEST_FIELDS: frozenset[str] = frozenset(
    {
        "temperature",
        "temperature_floor",
        "greedy_threshold",
        "top_k",
        "max_tokens",
        "log_level",
        "diagnostic_mode",
    }
)

_EXTRA_ARGS_PREFIX = "tp_"

# All known config field names (populated after class definition).
_ALL_FIELDS: frozenset[str] = frozenset()


class PlaygroundConfig(BaseSettings):
    """Configuration for temperature-playground.

    Resolution order: init kwargs -> env vars (TP_*) -> .env file -> defaults.

    Fields are divided into two groups:
    - **Infrastructure**: Draw source selection and model sharing policy,
      NOT overridable per-request.
    - **Decoding parameters**: Temperature, selection, stop and logging
      settings, overridable per-request via extra_args with tp_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Infrastructure (NOT per-request overridable) ---

    draw_source: str = Field(
        default="system",
        description="Uniform draw source: 'system', 'seeded', 'replay'",
    )
    draw_seed: int | None = Field(
        default=None,
        description="Seed for the 'seeded' draw source (None = fresh entropy)",
    )
    serialize_model: bool = Field(
        default=True,
        description="Serialize calls into a Model shared by concurrent sessions",
    )

    # --- Temperature (per-request overridable) ---

    temperature: float = Field(
        default=0.7,
        description="Sampling temperature (values <= 0 are clamped, never rejected)",
    )
    temperature_floor: float = Field(
        default=TEMPERATURE_FLOOR,
        description="Smallest temperature used when scaling scores",
    )
    greedy_threshold: float = Field(
        default=GREEDY_THRESHOLD,
        description="Temperatures below this use arg-max instead of sampling",
    )

    # --- Selection and stopping (per-request overridable) ---

    top_k: int = Field(
        default=10,
        description="Number of top candidates reported per step (<=0 reports none)",
    )
    max_tokens: int = Field(
        default=30,
        description="Maximum number of generated tokens per session",
    )

    # --- Comparison ---

    temperatures: list[float] = Field(
        default=[0.0, 0.7, 1.5],
        description="Temperatures compared side by side against one prompt",
    )

    # --- Logging (per-request overridable) ---

    log_level: str = Field(
        default="summary",
        description="Logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all token records in memory for analysis",
    )


_ALL_FIELDS = frozenset(PlaygroundConfig.model_fields.keys())


def _strip_prefix(key: str) -> str:
    """Strip the 'tp_' prefix from an extra_args key."""
    if key.startswith(_EXTRA_ARGS_PREFIX):
        return key[len(_EXTRA_ARGS_PREFIX) :]
    return key


def validate_extra_args(extra_args: dict[str, Any]) -> None:
    """Validate all tp_* keys in extra_args without creating a config.

    Args:
        extra_args: Dictionary of extra arguments, potentially with tp_ prefix.

    Raises:
        ConfigValidationError: If any tp_* key is unknown or non-overridable.
    """
    for key in extra_args:
        if not key.startswith(_EXTRA_ARGS_PREFIX):
            continue
        field_name = _strip_prefix(key)
        if field_name not in _ALL_FIELDS:
            raise ConfigValidationError(
                f"Unknown config field: '{key}' (no field '{field_name}' exists)"
            )
        if field_name not in _PER_REQUEST_FIELDS:
            raise ConfigValidationError(
                f"Field '{field_name}' is an infrastructure field and cannot be "
                f"overridden per-request via extra_args"
            )


def resolve_config(
    defaults: PlaygroundConfig,
    extra_args: dict[str, Any] | None,
) -> PlaygroundConfig:
    """Create a new config instance merging defaults with per-request overrides.

    The extra_args keys use the 'tp_' prefix (e.g., 'tp_top_k': 5). Keys
    without the prefix are silently ignored.

    Args:
        defaults: The base configuration loaded from environment.
        extra_args: Per-request overrides.

    Returns:
        A new PlaygroundConfig with overrides applied, or *defaults* itself
        when there is nothing to override.

    Raises:
        ConfigValidationError: If any tp_* key is unknown, non-overridable,
            or carries a value of the wrong type.
    """
    if not extra_args:
        return defaults

    validate_extra_args(extra_args)

    overrides: dict[str, Any] = {
        _strip_prefix(key): value
        for key, value in extra_args.items()
        if key.startswith(_EXTRA_ARGS_PREFIX)
    }
    if not overrides:
        return defaults

    # model_copy(update=...) skips validation; model_validate coerces types.
    merged = defaults.model_dump()
    merged.update(overrides)
    try:
        return PlaygroundConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid per-request override: {exc}") from exc
