"""Payment method code mapping.

Payment codes are fixed by the policy registry and are not served as a
reference list, so they are matched against a static option table.
"""

from typing import List, Optional

from policy_mapper.schemas.mapping import MappingSuggestion, MatchSource
from policy_mapper.schemas.policy import ReferenceItem
from policy_mapper.services.matching.similarity import normalize_text

PAYMENT_METHOD_OPTIONS = [
    ReferenceItem(id="1", name="Contado", code="1"),
    ReferenceItem(id="T", name="Tarjeta de Crédito", code="T"),
    ReferenceItem(id="E", name="Efectivo", code="E"),
    ReferenceItem(id="B", name="Transferencia Bancaria", code="B"),
    ReferenceItem(id="C", name="Crédito", code="C"),
]

# (keywords, option id, confidence), first hit wins
PAYMENT_METHOD_RULES = [
    (("TARJETA", "CREDITO", "CRÉDITO"), "T", 0.90),
    (("CONTADO", "EFECTIVO"), "1", 0.90),
    (("TRANSFERENCIA",), "B", 0.85),
]
DEFAULT_PAYMENT_OPTION = "1"
DEFAULT_PAYMENT_CONFIDENCE = 0.50


def _option(options: List[ReferenceItem], option_id: str) -> ReferenceItem:
    return next(option for option in options if option.id == option_id)


def map_payment_method(text: Optional[str]) -> MappingSuggestion:
    """Suggest a registry payment code for a scanned payment method.

    Unrecognized or empty text defaults to "Contado" at 0.5 confidence.
    """
    value = normalize_text(text)
    for keywords, option_id, confidence in PAYMENT_METHOD_RULES:
        if value and any(keyword in value for keyword in keywords):
            option = _option(PAYMENT_METHOD_OPTIONS, option_id)
            return MappingSuggestion(
                field_name="payment_method",
                scanned_value=text or "",
                suggested_id=option.id,
                suggested_label=option.name,
                confidence=confidence,
                source=MatchSource.RULE,
            )

    option = _option(PAYMENT_METHOD_OPTIONS, DEFAULT_PAYMENT_OPTION)
    return MappingSuggestion(
        field_name="payment_method",
        scanned_value=text or "",
        suggested_id=option.id,
        suggested_label=option.name,
        confidence=DEFAULT_PAYMENT_CONFIDENCE,
        source=MatchSource.NONE,
    )
