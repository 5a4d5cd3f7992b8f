"""Provider normalizer interface and shared normalization helpers.

A normalizer pre-processes the raw OCR field bag of one insurer before
extraction: it removes provider label noise and folds provider keys and
table layouts into the canonical key space. Normalizers never mutate the
bag they receive; every helper below returns a new dict.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from policy_mapper.core.exceptions import ValidationError
from policy_mapper.services.extraction.parsers import collapse_whitespace

FieldBag = Dict[str, str]

# Provider-agnostic key renames applied by every normalizer
DEFAULT_KEY_RENAMES = {
    "vehiculo.año": "vehiculo.anio",
    "vehiculo.patente": "vehiculo.matricula",
    "vehiculo.tipo_vehiculo": "vehiculo.tipo_de_vehiculo",
    "vehiculo.destino": "vehiculo.destino_del_vehiculo",
    "poliza.fecha-desde": "poliza.vigencia.desde",
    "poliza.fecha_desde": "poliza.vigencia.desde",
    "poliza.fecha-hasta": "poliza.vigencia.hasta",
    "poliza.fecha_hasta": "poliza.vigencia.hasta",
    "asegurado.localidad": "asegurado.departamento",
}

INSTALLMENT_DUE_KEY = "pago.vencimiento_cuota[{index}]"
INSTALLMENT_AMOUNT_KEYS = ("pago.prima_cuota[{index}]",)
INSTALLMENT_COUNT_KEY = "pago.cantidad_cuotas"
NORMALIZED_DUE_KEY = "pago.cuotas[{index}].vencimiento"
NORMALIZED_AMOUNT_KEY = "pago.cuotas[{index}].prima"

# Most specific rule first: (label, required pattern, excluding pattern)
MODALITY_RULES: List[Tuple[str, str, Optional[str]]] = [
    ("TODO RIESGO TOTAL", r"(?=.*TODO\s+RIESGO)(?=.*\bTOTAL\b)", None),
    ("TODO RIESGO", r"TODO\s+RIESGO", None),
    ("TOTAL", r"\bTOTAL\b", r"B[AÁ]SIC[AO]"),
    ("TERCEROS", r"TERCEROS|\bRC\b|RESPONSABILIDAD\s+CIVIL", None),
    ("BASICA", r"B[AÁ]SIC[AO]|M[IÍ]NIM[AO]", None),
]


def copy_bag(bag: Mapping[str, Any]) -> FieldBag:
    """Validated string-to-string copy of a field bag."""
    if not isinstance(bag, Mapping):
        raise ValidationError(f"Field bag must be a mapping, got {type(bag).__name__}")
    return {str(key).strip(): "" if value is None else str(value) for key, value in bag.items()}


def fold_synonyms(bag: Mapping[str, str], synonyms: Mapping[str, str]) -> FieldBag:
    """Copy synonym keys onto canonical keys without overwriting.

    The source key is kept. A canonical key that already holds a non-empty
    value always wins.
    """
    folded = dict(bag)
    for source, target in synonyms.items():
        value = folded.get(source, "")
        if value.strip() and not folded.get(target, "").strip():
            folded[target] = value
    return folded


def strip_value_prefixes(
    bag: Mapping[str, str],
    prefixes: Mapping[str, Sequence[str]],
    collapse_spaces: bool = False,
) -> FieldBag:
    """Remove provider label prefixes from the values of the given keys.

    Prefixes are compared case-insensitively and the first match wins. The
    check repeats until no prefix applies, so a second pass is a no-op.
    """
    cleaned = dict(bag)
    for key, candidates in prefixes.items():
        value = cleaned.get(key)
        if not value:
            continue
        stripped = True
        while stripped:
            stripped = False
            for prefix in candidates:
                if value.lower().startswith(prefix.lower()) and len(value) > len(prefix):
                    value = value[len(prefix):].strip()
                    stripped = True
                    break
        value = value.strip()
        if collapse_spaces:
            value = re.sub(r" {2,}", " ", value)
        cleaned[key] = value
    return cleaned


def collapse_installments(
    bag: Mapping[str, str],
    max_index: int,
    amount_keys: Iterable[str] = INSTALLMENT_AMOUNT_KEYS,
) -> FieldBag:
    """Fold indexed installment rows into a 0-indexed schedule and a count.

    Rows ``pago.vencimiento_cuota[i]`` / ``pago.prima_cuota[i]`` for ``i`` in
    ``1..max_index`` become ``pago.cuotas[i-1].vencimiento`` /
    ``pago.cuotas[i-1].prima``. The count is the number of indices with a due
    date or an amount. Existing normalized keys are left untouched.
    """
    collapsed = dict(bag)
    amount_keys = tuple(amount_keys)
    position = 0
    for index in range(1, max_index + 1):
        due = bag.get(INSTALLMENT_DUE_KEY.format(index=index), "").strip()
        amount = ""
        for template in amount_keys:
            amount = bag.get(template.format(index=index), "").strip()
            if amount:
                break
        if not due and not amount:
            continue
        if due:
            collapsed.setdefault(NORMALIZED_DUE_KEY.format(index=position), due)
        if amount:
            collapsed.setdefault(NORMALIZED_AMOUNT_KEY.format(index=position), amount)
        position += 1

    if position and not collapsed.get(INSTALLMENT_COUNT_KEY, "").strip():
        collapsed[INSTALLMENT_COUNT_KEY] = str(position)
    return collapsed


def classify_modality(text: Optional[str]) -> str:
    """Map a coverage modality string onto the closed modality vocabulary.

    Unrecognized text is returned upper-cased.
    """
    value = collapse_whitespace(text).upper()
    if not value:
        return ""
    for label, pattern, excluded in MODALITY_RULES:
        if re.search(pattern, value) and not (excluded and re.search(excluded, value)):
            return label
    return value


def default_pass(bag: Mapping[str, Any]) -> FieldBag:
    """Provider-agnostic normalization shared by every variant."""
    return fold_synonyms(copy_bag(bag), DEFAULT_KEY_RENAMES)


class CompanyNormalizer(ABC):
    """Interface implemented by every provider normalizer.

    Attributes:
        provider_name: Display name of the insurer handled by the variant
    """

    provider_name: str = "DEFAULT"

    def __init__(self, max_installment_index: int = 12):
        self.max_installment_index = max_installment_index

    @abstractmethod
    def normalize(self, bag: Mapping[str, Any], registry: Optional[Any] = None) -> FieldBag:
        """Return a normalized copy of ``bag``.

        Args:
            bag: Raw OCR field bag
            registry: Optional reference-data accessor for variants that need it

        Returns:
            New normalized bag; the input is left untouched
        """
        raise NotImplementedError
