"""Completeness and confidence metrics for a mapped policy."""

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.schemas.mapping import (
    CategoryMetric,
    ConfidenceBucket,
    ConfidenceLevel,
    FieldConfidence,
    ImprovementSuggestion,
    MappingMetrics,
    MatchResult,
    MatchSource,
)
from policy_mapper.schemas.policy import CanonicalPolicyData

# Category -> [(field, critical)]
FIELD_CATEGORIES: Dict[str, List[Tuple[str, bool]]] = {
    "policy": [
        ("policy_number", True),
        ("endorsement", False),
        ("start_date", True),
        ("end_date", True),
        ("movement_type", False),
    ],
    "vehicle": [
        ("vehicle_brand", True),
        ("vehicle_model", True),
        ("vehicle_year", True),
        ("vehicle_motor", False),
        ("vehicle_chassis", False),
        ("vehicle_fuel", False),
        ("vehicle_destination", False),
        ("vehicle_category", False),
    ],
    "financial": [
        ("premium", True),
        ("total_amount", False),
        ("payment_method", False),
        ("installment_count", False),
    ],
    "client": [
        ("client_name", True),
        ("client_document", True),
        ("department", False),
        ("client_address", False),
    ],
    "master_data": [
        ("department", False),
        ("vehicle_fuel", False),
        ("vehicle_destination", False),
        ("vehicle_category", False),
    ],
    "optional": [
        ("broker_name", False),
        ("broker_code", False),
        ("currency_code", False),
    ],
}

# Fields counted towards overall completion
EXPECTED_FIELDS = [
    "policy_number",
    "endorsement",
    "start_date",
    "end_date",
    "movement_type",
    "vehicle_brand",
    "vehicle_model",
    "vehicle_year",
    "vehicle_motor",
    "vehicle_chassis",
    "vehicle_plate",
    "vehicle_fuel",
    "vehicle_destination",
    "vehicle_category",
    "premium",
    "total_amount",
    "installment_count",
    "payment_method",
    "client_name",
    "client_document",
]

# Record defaults that stand for "not found"
PLACEHOLDER_VALUES = {"endorsement": "0"}

QUALITY_LEVELS = [(90, "Excelente"), (75, "Buena"), (50, "Aceptable"), (25, "Básica")]
CONFIDENCE_LABELS = [(90, "Muy Alta"), (75, "Alta"), (60, "Media"), (40, "Baja")]
CONFIDENCE_BUCKETS = [
    (ConfidenceLevel.EXACT, 90),
    (ConfidenceLevel.HIGH, 75),
    (ConfidenceLevel.MEDIUM, 50),
    (ConfidenceLevel.LOW, 25),
    (ConfidenceLevel.VERY_LOW, 0),
]


def _label(value: float, levels: List[Tuple[int, str]], lowest: str) -> str:
    for floor, label in levels:
        if value >= floor:
            return label
    return lowest


def quality_level(percentage: float) -> str:
    """Excelente / Buena / Aceptable / Básica / Insuficiente."""
    return _label(percentage, QUALITY_LEVELS, "Insuficiente")


def confidence_label(percentage: float) -> str:
    """Muy Alta / Alta / Media / Baja / Muy Baja."""
    return _label(percentage, CONFIDENCE_LABELS, "Muy Baja")


def bucket_for(percentage: float) -> ConfidenceLevel:
    for level, floor in CONFIDENCE_BUCKETS:
        if percentage >= floor:
            return level
    return ConfidenceLevel.VERY_LOW


def is_mapped(value: Any, field_name: Optional[str] = None) -> bool:
    if field_name in PLACEHOLDER_VALUES and value == PLACEHOLDER_VALUES[field_name]:
        return False
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return value > 0
    return bool(value)


def _percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(min(100.0, part / whole * 100), 2)


class MetricsCalculator:
    """Builds ``MappingMetrics`` from an extracted record and its matches."""

    def __init__(self, settings: Optional[MapperSettings] = None):
        self.settings = settings or get_settings()

    def calculate(
        self,
        bag: Mapping[str, Any],
        policy: CanonicalPolicyData,
        matches: Mapping[str, MatchResult],
    ) -> MappingMetrics:
        """Compute completion, confidence histogram and review hints.

        Args:
            bag: Normalized field bag the record was extracted from
            policy: Extracted record
            matches: Reference match per canonical field

        Returns:
            MappingMetrics: Metrics summary
        """
        values = policy.model_dump()
        categories = {
            name: self._category_metric(name, fields, values, matches)
            for name, fields in FIELD_CATEGORIES.items()
        }

        mapped = sum(1 for field in EXPECTED_FIELDS if is_mapped(values.get(field), field))
        overall = _percentage(mapped, self.settings.total_expected_fields)

        confidences = self._field_confidences(values, matches)
        buckets = self._buckets(confidences)
        average = (
            round(sum(c.confidence for c in confidences) / len(confidences), 2)
            if confidences else 0.0
        )

        return MappingMetrics(
            total_fields_scanned=sum(1 for value in bag.values() if str(value).strip()),
            fields_mapped=mapped,
            fields_missing=max(0, len(EXPECTED_FIELDS) - mapped),
            overall_completion=overall,
            mapping_quality=quality_level(overall),
            categories=categories,
            field_confidences=confidences,
            confidence_buckets=buckets,
            average_confidence=average,
            overall_confidence_level=confidence_label(average),
            fields_requiring_attention=[c.field_name for c in confidences if c.requires_attention],
            improvement_suggestions=self._improvement_suggestions(policy),
        )

    def _category_metric(
        self,
        name: str,
        fields: List[Tuple[str, bool]],
        values: Dict[str, Any],
        matches: Mapping[str, MatchResult],
    ) -> CategoryMetric:
        mapped_names = []
        critical_missing = []
        for field, critical in fields:
            if name == "master_data":
                match = matches.get(field)
                mapped = match is not None and match.source != MatchSource.NONE
            else:
                mapped = is_mapped(values.get(field), field)
            if mapped:
                mapped_names.append(field)
            elif critical:
                critical_missing.append(field)

        completion = _percentage(len(mapped_names), len(fields))
        return CategoryMetric(
            category=name,
            total_fields=len(fields),
            mapped_fields=len(mapped_names),
            completion_percentage=completion,
            quality_level=quality_level(completion),
            critical_missing=critical_missing,
            mapped_field_names=mapped_names,
        )

    def _field_confidences(
        self, values: Dict[str, Any], matches: Mapping[str, MatchResult]
    ) -> List[FieldConfidence]:
        threshold = self.settings.low_confidence_threshold * 100
        fields = list(EXPECTED_FIELDS)
        # Reference-coded fields outside the expected set count once scanned
        fields += [f for f in matches if f not in fields and is_mapped(values.get(f), f)]

        confidences = []
        for field in fields:
            value = values.get(field)
            if field in matches and is_mapped(value, field):
                confidence = matches[field].confidence * 100
            else:
                confidence = 100.0 if is_mapped(value, field) else 0.0
            confidence = round(min(100.0, max(0.0, confidence)), 2)
            confidences.append(FieldConfidence(
                field_name=field,
                value="" if value is None else str(value),
                confidence=confidence,
                requires_attention=confidence < threshold,
            ))
        return confidences

    @staticmethod
    def _buckets(confidences: List[FieldConfidence]) -> List[ConfidenceBucket]:
        grouped: Dict[ConfidenceLevel, List[FieldConfidence]] = {level: [] for level, _ in CONFIDENCE_BUCKETS}
        for item in confidences:
            grouped[bucket_for(item.confidence)].append(item)

        buckets = []
        for level, items in grouped.items():
            buckets.append(ConfidenceBucket(
                level=level,
                field_count=len(items),
                percentage=_percentage(len(items), len(confidences)),
                field_names=[item.field_name for item in items],
                average_confidence=(
                    round(sum(item.confidence for item in items) / len(items), 2) if items else 0.0
                ),
            ))
        return buckets

    @staticmethod
    def _improvement_suggestions(policy: CanonicalPolicyData) -> List[ImprovementSuggestion]:
        suggestions = []
        if not policy.vehicle_motor:
            suggestions.append(ImprovementSuggestion(
                field_name="vehicle_motor",
                message="Número de motor no detectado; verificar en el documento original",
                priority="Media",
            ))
        if not policy.vehicle_fuel:
            suggestions.append(ImprovementSuggestion(
                field_name="vehicle_fuel",
                message="Tipo de combustible no detectado; seleccionar manualmente",
                priority="Baja",
            ))
        return suggestions
