"""Per-document mapping pipeline.

Runs provider normalization, canonical extraction and reference matching for
one OCR field bag and summarizes the outcome as suggestions, issues and
metrics. Data problems never raise out of ``run``: they surface as issues
and through the ``is_complete`` flag.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.core.exceptions import ValidationError
from policy_mapper.schemas.mapping import (
    IssueSeverity,
    IssueType,
    MappingIssue,
    MappingMetrics,
    MappingResult,
    MappingSuggestion,
    MatchResult,
)
from policy_mapper.schemas.policy import CanonicalPolicyData
from policy_mapper.services.extraction.field_extractor import FieldExtractor
from policy_mapper.services.mapping.issue_collector import IssueCollector
from policy_mapper.services.mapping.metrics_calculator import MetricsCalculator
from policy_mapper.services.matching.payment_mapper import map_payment_method
from policy_mapper.services.matching.reference_matcher import ReferenceMatcher
from policy_mapper.services.matching.rule_tables import RULE_TABLES
from policy_mapper.services.matching.similarity import EDIT_DISTANCE, WORD_OVERLAP
from policy_mapper.services.normalization.normalizer_factory import CompanyNormalizerFactory
from policy_mapper.utils.logging import get_logger

LOGGER = get_logger(__name__)

# (canonical field, reference list type, similarity strategy)
REFERENCE_FIELDS: List[Tuple[str, str, str]] = [
    ("vehicle_fuel", "fuel", EDIT_DISTANCE),
    ("vehicle_destination", "destination", EDIT_DISTANCE),
    ("department", "department", EDIT_DISTANCE),
    ("vehicle_category", "category", EDIT_DISTANCE),
    ("quality", "quality", EDIT_DISTANCE),
    ("tariff", "tariff", WORD_OVERLAP),
    ("broker_name", "broker", WORD_OVERLAP),
    ("currency_code", "currency", EDIT_DISTANCE),
]

GENERAL_FIELD = "general"


class MappingOrchestrator:
    """Composes normalizer, extractor and matcher for one document.

    Attributes:
        settings: Mapper settings shared by every component
        normalizer_factory: Provider normalizer resolution
        extractor: Canonical field extractor
        matcher: Reference matcher
    """

    def __init__(
        self,
        settings: Optional[MapperSettings] = None,
        normalizer_factory: Optional[CompanyNormalizerFactory] = None,
        extractor: Optional[FieldExtractor] = None,
        matcher: Optional[ReferenceMatcher] = None,
    ):
        self.settings = settings or get_settings()
        self.normalizer_factory = normalizer_factory or CompanyNormalizerFactory(self.settings)
        self.extractor = extractor or FieldExtractor(self.settings)
        self.matcher = matcher or ReferenceMatcher(self.settings)
        self.issue_collector = IssueCollector(self.settings)
        self.metrics_calculator = MetricsCalculator(self.settings)

    def run(
        self,
        bag: Mapping[str, Any],
        provider_id: Any,
        reference_lists: Mapping[str, Any],
    ) -> MappingResult:
        """Map one OCR field bag onto a canonical policy record.

        Args:
            bag: Raw OCR field bag (key -> text)
            provider_id: Insurer identifier used to pick the normalizer
            reference_lists: Reference list type -> reference items

        Returns:
            MappingResult: Record, suggestions, issues, metrics and readiness
        """
        failures: List[MappingIssue] = []

        def guarded(step: str, func: Callable[[], Any], default: Any, field_name: str = GENERAL_FIELD) -> Any:
            try:
                return func()
            except Exception as e:
                LOGGER.error(
                    f"Mapping step '{step}' failed: {e}",
                    extra={"step": step, "provider_id": str(provider_id), "error": str(e)},
                    exc_info=True,
                )
                failures.append(MappingIssue(
                    field_name=field_name,
                    issue_type=IssueType.VALIDATION_ERROR,
                    severity=IssueSeverity.ERROR,
                    description=f"Error procesando '{step}': {e}",
                ))
                return default

        normalizer = self.normalizer_factory.get_normalizer(provider_id)
        normalized = guarded("normalization", lambda: normalizer.normalize(bag), {})
        policy = guarded("extraction", lambda: self.extractor.extract(normalized), CanonicalPolicyData())

        values = policy.model_dump()
        scanned = {field: str(values.get(field) or "") for field, _, _ in REFERENCE_FIELDS}
        lists = guarded("reference_lists", lambda: self._validate_reference_lists(reference_lists), None)

        matches: Dict[str, MatchResult] = {}
        if lists is not None:
            for field_name, list_type, strategy in REFERENCE_FIELDS:
                result = guarded(
                    f"matching:{list_type}",
                    lambda: self.matcher.match(
                        scanned[field_name],
                        lists.get(list_type, []),
                        rule_table=RULE_TABLES.get(list_type),
                        strategy=strategy,
                    ),
                    None,
                    field_name=field_name,
                )
                if result is not None:
                    matches[field_name] = result

        suggestions = guarded(
            "suggestions", lambda: self._build_suggestions(policy, matches, scanned), []
        )
        issues = guarded(
            "issues", lambda: self.issue_collector.collect(policy, matches, scanned), []
        )
        metrics = guarded(
            "metrics",
            lambda: self.metrics_calculator.calculate(normalized, policy, matches),
            MappingMetrics(),
        )
        issues = issues + failures

        is_complete = self._is_complete(policy, issues)
        result = MappingResult(
            provider_id=self.normalizer_factory.normalize_provider_id(provider_id),
            provider_name=normalizer.provider_name,
            policy_data=policy,
            matches=matches,
            suggestions=suggestions,
            issues=issues,
            metrics=metrics,
            is_complete=is_complete,
            ready_for_submission=is_complete and not any(
                issue.severity == IssueSeverity.ERROR for issue in issues
            ),
        )
        LOGGER.info(
            "Mapped policy document",
            extra={
                "provider": normalizer.provider_name,
                "policy_number": policy.policy_number,
                "issues": len(issues),
                "suggestions": len(suggestions),
                "completion": metrics.overall_completion,
                "is_complete": is_complete,
            },
        )
        return result

    @staticmethod
    def _validate_reference_lists(reference_lists: Any) -> Mapping[str, Any]:
        if reference_lists is None:
            raise ValidationError("Reference lists are required")
        if not isinstance(reference_lists, Mapping):
            raise ValidationError(
                f"Reference lists must be a mapping, got {type(reference_lists).__name__}"
            )
        return reference_lists

    @staticmethod
    def _build_suggestions(
        policy: CanonicalPolicyData,
        matches: Mapping[str, MatchResult],
        scanned: Mapping[str, str],
    ) -> List[MappingSuggestion]:
        suggestions = []
        for field_name, match in matches.items():
            if match.confidence >= 1.0:
                continue
            suggestions.append(MappingSuggestion(
                field_name=field_name,
                scanned_value=scanned.get(field_name, ""),
                suggested_id=match.item.id if match.item else None,
                suggested_label=match.item.name if match.item else "",
                confidence=match.confidence,
                source=match.source,
            ))
        if policy.payment_method:
            suggestions.append(map_payment_method(policy.payment_method))
        return suggestions

    def _is_complete(self, policy: CanonicalPolicyData, issues: List[MappingIssue]) -> bool:
        return (
            not any(issue.issue_type == IssueType.MISSING_CRITICAL for issue in issues)
            and len(policy.policy_number) >= self.settings.min_policy_number_length
            and bool(policy.start_date)
            and bool(policy.end_date)
        )
