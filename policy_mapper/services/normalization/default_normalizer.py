"""Default normalizer for providers without a dedicated variant."""

from typing import Any, Mapping, Optional

from policy_mapper.services.normalization.base_normalizer import (
    CompanyNormalizer,
    FieldBag,
    default_pass,
)
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DefaultNormalizer(CompanyNormalizer):
    """Applies the provider-agnostic key renames only."""

    provider_name = "DEFAULT"

    def normalize(self, bag: Mapping[str, Any], registry: Optional[Any] = None) -> FieldBag:
        normalized = default_pass(bag)
        LOGGER.debug(
            "DefaultNormalizer applied",
            extra={"input_fields": len(bag), "output_fields": len(normalized)},
        )
        return normalized
