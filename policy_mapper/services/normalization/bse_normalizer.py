"""Normalizer for BSE (Banco de Seguros del Estado) documents."""

from typing import Any, Mapping, Optional

from policy_mapper.services.normalization.base_normalizer import (
    CompanyNormalizer,
    FieldBag,
    collapse_installments,
    default_pass,
)


class BseNormalizer(CompanyNormalizer):
    """BSE output already uses the canonical key space.

    Only the shared renames and the indexed installment table apply.
    """

    provider_name = "BSE"

    def normalize(self, bag: Mapping[str, Any], registry: Optional[Any] = None) -> FieldBag:
        return collapse_installments(default_pass(bag), self.max_installment_index)
