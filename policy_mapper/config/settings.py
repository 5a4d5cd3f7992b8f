"""Policy mapper settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from policy_mapper.core.exceptions import ConfigurationError


def find_env_file() -> str:
    """Locate the .env file at the project root."""
    return str(Path(__file__).resolve().parent.parent.parent / ".env")


class MapperSettings(BaseSettings):
    """Tunables for extraction, matching and scoring."""

    # Logging
    log_level: str = Field(default="INFO", validation_alias="POLICY_MAPPER_LOG_LEVEL")

    # Matching thresholds
    word_overlap_threshold: float = Field(
        default=0.5, validation_alias="POLICY_MAPPER_WORD_OVERLAP_THRESHOLD"
    )
    edit_distance_threshold: float = Field(
        default=0.6, validation_alias="POLICY_MAPPER_EDIT_DISTANCE_THRESHOLD"
    )
    low_confidence_threshold: float = Field(
        default=0.7, validation_alias="POLICY_MAPPER_LOW_CONFIDENCE_THRESHOLD"
    )

    # Extraction
    max_installment_index: int = Field(
        default=12, validation_alias="POLICY_MAPPER_MAX_INSTALLMENT_INDEX"
    )
    min_policy_number_length: int = Field(
        default=7, validation_alias="POLICY_MAPPER_MIN_POLICY_NUMBER_LENGTH"
    )
    default_currency_code: str = Field(
        default="858", validation_alias="POLICY_MAPPER_DEFAULT_CURRENCY_CODE"
    )

    # Metrics
    total_expected_fields: int = Field(
        default=20, validation_alias="POLICY_MAPPER_TOTAL_EXPECTED_FIELDS"
    )

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def check_ranges(self) -> "MapperSettings":
        for name in (
            "word_overlap_threshold",
            "edit_distance_threshold",
            "low_confidence_threshold",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.max_installment_index < 1:
            raise ConfigurationError("max_installment_index must be at least 1")
        if self.total_expected_fields < 1:
            raise ConfigurationError("total_expected_fields must be at least 1")
        return self


@lru_cache()
def get_settings() -> MapperSettings:
    """Return the process-wide settings instance."""
    return MapperSettings()
