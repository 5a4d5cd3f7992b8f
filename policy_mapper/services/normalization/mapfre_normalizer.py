"""Normalizer for MAPFRE documents."""

from typing import Any, Mapping, Optional

from policy_mapper.services.normalization.base_normalizer import (
    CompanyNormalizer,
    FieldBag,
    classify_modality,
    collapse_installments,
    default_pass,
    fold_synonyms,
    strip_value_prefixes,
)
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)

MAPFRE_SYNONYMS = {
    "costo.costo": "poliza.prima_comercial",
    "costo.premio_total": "financiero.premio_total",
}

MAPFRE_INSTALLMENT_AMOUNT_KEYS = ("pago.prima_cuota[{index}]", "pago.cuota_monto[{index}]")

MAPFRE_VALUE_PREFIXES = {
    "vehiculo.marca": ("Marca\n", "Marca ", "Marca:"),
    "vehiculo.modelo": ("Modelo\n", "Modelo ", "Modelo:"),
    "vehiculo.motor": ("Motor\n", "Motor ", "Motor:"),
    "vehiculo.chasis": ("Chasis\n", "Chasis ", "Chasis:"),
    "vehiculo.anio": ("Año\n", "Año ", "Año:"),
}

MODALITY_KEY = "poliza.modalidad"
NORMALIZED_MODALITY_KEY = "poliza.modalidad_normalizada"


class MapfreNormalizer(CompanyNormalizer):
    """MAPFRE uses "costo" keys, a split installment table and free-text modalities."""

    provider_name = "MAPFRE"

    def normalize(self, bag: Mapping[str, Any], registry: Optional[Any] = None) -> FieldBag:
        normalized = strip_value_prefixes(default_pass(bag), MAPFRE_VALUE_PREFIXES, collapse_spaces=True)
        normalized = fold_synonyms(normalized, MAPFRE_SYNONYMS)
        normalized = collapse_installments(
            normalized, self.max_installment_index, MAPFRE_INSTALLMENT_AMOUNT_KEYS
        )

        modality = normalized.get(MODALITY_KEY, "")
        if modality.strip() and not normalized.get(NORMALIZED_MODALITY_KEY, "").strip():
            normalized[NORMALIZED_MODALITY_KEY] = classify_modality(modality)
            LOGGER.info(
                "MAPFRE modality normalized",
                extra={"original": modality, "normalized": normalized[NORMALIZED_MODALITY_KEY]},
            )
        return normalized
