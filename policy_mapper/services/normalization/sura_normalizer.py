"""Normalizer for SURA documents."""

import re
from typing import Any, Mapping, Optional

from policy_mapper.services.normalization.base_normalizer import (
    INSTALLMENT_COUNT_KEY,
    CompanyNormalizer,
    FieldBag,
    collapse_installments,
    default_pass,
    fold_synonyms,
    strip_value_prefixes,
)
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)

SURA_SYNONYMS = {
    "premio.premio": "poliza.prima_comercial",
    "premio.total": "financiero.premio_total",
}

SURA_PAYMENT_FORM_KEY = "pago.forma_de_pago"
SURA_PAYMENTS_PATTERN = r"(\d+)\s*PAGOS"


def _label_prefixes(*labels: str):
    return tuple(f"{label}{sep}" for label in labels for sep in ("\n", " ", ":"))


SURA_VALUE_PREFIXES = {
    "vehiculo.marca": _label_prefixes("Marca"),
    "vehiculo.modelo": _label_prefixes("Modelo"),
    "vehiculo.motor": _label_prefixes("Motor"),
    "vehiculo.chasis": _label_prefixes("Chasis"),
    "vehiculo.anio": _label_prefixes("Año"),
    "vehiculo.color": _label_prefixes("Color"),
    "vehiculo.tipo": _label_prefixes("Tipo"),
    "vehiculo.matricula": _label_prefixes("Matrícula", "Matricula", "Patente"),
    "vehiculo.patente": _label_prefixes("Patente"),
}


class SuraNormalizer(CompanyNormalizer):
    """SURA labels vehicle values inline and reports installments as "N PAGOS"."""

    provider_name = "SURA"

    def normalize(self, bag: Mapping[str, Any], registry: Optional[Any] = None) -> FieldBag:
        normalized = collapse_installments(default_pass(bag), self.max_installment_index)
        normalized = fold_synonyms(normalized, SURA_SYNONYMS)

        payment_form = normalized.get(SURA_PAYMENT_FORM_KEY, "")
        match = re.search(SURA_PAYMENTS_PATTERN, payment_form, re.IGNORECASE)
        if match and not normalized.get(INSTALLMENT_COUNT_KEY, "").strip():
            normalized[INSTALLMENT_COUNT_KEY] = str(int(match.group(1)))
            LOGGER.info(
                "SURA installment count taken from payment form",
                extra={"installments": normalized[INSTALLMENT_COUNT_KEY], "payment_form": payment_form},
            )

        return strip_value_prefixes(normalized, SURA_VALUE_PREFIXES)
