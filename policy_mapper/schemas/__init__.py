from .policy import CanonicalPolicyData, InstallmentEntry, ReferenceItem
from .mapping import (
    CategoryMetric,
    ConfidenceBucket,
    ConfidenceLevel,
    FieldConfidence,
    ImprovementSuggestion,
    IssueSeverity,
    IssueType,
    MappingIssue,
    MappingMetrics,
    MappingResult,
    MappingSuggestion,
    MatchResult,
    MatchSource,
)

__all__ = [
    "CanonicalPolicyData",
    "InstallmentEntry",
    "ReferenceItem",
    "CategoryMetric",
    "ConfidenceBucket",
    "ConfidenceLevel",
    "FieldConfidence",
    "ImprovementSuggestion",
    "IssueSeverity",
    "IssueType",
    "MappingIssue",
    "MappingMetrics",
    "MappingResult",
    "MappingSuggestion",
    "MatchResult",
    "MatchSource",
]
