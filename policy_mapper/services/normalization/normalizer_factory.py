"""Normalizer factory for provider-specific normalization routing.

Maps insurer identifiers to normalizer classes. Resolution never fails:
unknown, missing or malformed identifiers resolve to ``DefaultNormalizer``.
"""

from typing import Any, Dict, List, Optional, Type

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.services.normalization.base_normalizer import CompanyNormalizer
from policy_mapper.services.normalization.bse_normalizer import BseNormalizer
from policy_mapper.services.normalization.default_normalizer import DefaultNormalizer
from policy_mapper.services.normalization.mapfre_normalizer import MapfreNormalizer
from policy_mapper.services.normalization.sura_normalizer import SuraNormalizer
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CompanyNormalizerFactory:
    """Factory for provider normalizers.

    Attributes:
        settings: Mapper settings passed on to every normalizer
        _registry: Mapping of provider ids to normalizer classes
    """

    def __init__(self, settings: Optional[MapperSettings] = None):
        self.settings = settings or get_settings()
        self._registry: Dict[int, Type[CompanyNormalizer]] = {}
        self._default_normalizer_class: Type[CompanyNormalizer] = DefaultNormalizer
        self._register_default_normalizers()

    def _register_default_normalizers(self):
        """Register the built-in insurers."""
        self.register_normalizer([1], BseNormalizer)
        self.register_normalizer([2, 4], SuraNormalizer)
        self.register_normalizer([3], MapfreNormalizer)

    def register_normalizer(
        self,
        provider_ids: List[int],
        normalizer_class: Type[CompanyNormalizer],
    ):
        """Register a normalizer class for one or more provider ids.

        Args:
            provider_ids: Insurer identifiers
            normalizer_class: Normalizer class to instantiate
        """
        for provider_id in provider_ids:
            self._registry[int(provider_id)] = normalizer_class
        LOGGER.debug(
            f"Registered {normalizer_class.__name__} for {len(provider_ids)} providers"
        )

    def get_normalizer(self, provider_id: Any) -> CompanyNormalizer:
        """Resolve the normalizer for a provider.

        Args:
            provider_id: Insurer identifier (int or numeric string)

        Returns:
            CompanyNormalizer: New normalizer instance, ``DefaultNormalizer``
            when the id is unknown
        """
        try:
            normalized = self.normalize_provider_id(provider_id)
            normalizer_class = self._registry.get(normalized) if normalized is not None else None
            if normalizer_class is None:
                LOGGER.info(
                    f"No normalizer registered for provider '{provider_id}', using default",
                    extra={"provider_id": str(provider_id)},
                )
                normalizer_class = self._default_normalizer_class
            return normalizer_class(max_installment_index=self.settings.max_installment_index)
        except Exception as e:
            LOGGER.warning(
                f"Normalizer lookup failed for provider '{provider_id}', using default",
                extra={"provider_id": str(provider_id), "error": str(e)},
            )
            return self._default_normalizer_class(
                max_installment_index=self.settings.max_installment_index
            )

    @staticmethod
    def normalize_provider_id(provider_id: Any) -> Optional[int]:
        """Coerce a provider id to int, ``None`` when it is not numeric."""
        if provider_id is None or isinstance(provider_id, bool):
            return None
        try:
            return int(str(provider_id).strip())
        except (TypeError, ValueError):
            return None

    def available_providers(self) -> Dict[int, str]:
        """Registered provider ids and the insurer each one maps to."""
        return {
            provider_id: self._registry[provider_id].provider_name
            for provider_id in sorted(self._registry)
        }

    def get_normalizer_class_name(self, provider_id: Any) -> str:
        """Name of the normalizer class a provider resolves to."""
        normalized = self.normalize_provider_id(provider_id)
        normalizer_class = self._registry.get(normalized, self._default_normalizer_class)
        return normalizer_class.__name__
