"""Mapping outcome models: suggestions, issues and metrics."""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from policy_mapper.schemas.policy import CanonicalPolicyData, ReferenceItem


class MatchSource(str, Enum):
    """How a reference item was chosen."""

    RULE = "Rule"
    SIMILARITY = "Similarity"
    NONE = "None"


class IssueType(str, Enum):
    """Kind of mapping issue."""

    MISSING_CRITICAL = "MissingCritical"
    LOW_CONFIDENCE = "LowConfidence"
    VALIDATION_ERROR = "ValidationError"


class IssueSeverity(str, Enum):
    """Severity of a mapping issue."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


class ConfidenceLevel(str, Enum):
    """Histogram bucket for field confidence (percent)."""

    EXACT = "Exact"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "VeryLow"


class MatchResult(BaseModel):
    """Outcome of matching one text value against a reference list."""

    model_config = ConfigDict(frozen=True)

    item: Optional[ReferenceItem] = Field(default=None)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source: MatchSource = Field(default=MatchSource.NONE)


class MappingSuggestion(BaseModel):
    """A reference match that needs human confirmation."""

    model_config = ConfigDict(frozen=True)

    field_name: str = Field(..., description="Canonical field the suggestion refers to")
    scanned_value: str = Field(default="", description="Value as extracted from the document")
    suggested_id: Optional[Union[int, str]] = Field(default=None)
    suggested_label: str = Field(default="")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source: MatchSource = Field(default=MatchSource.NONE)


class MappingIssue(BaseModel):
    """A gap or problem detected while mapping a document."""

    model_config = ConfigDict(frozen=True)

    field_name: str = Field(..., description="Canonical field the issue refers to")
    issue_type: IssueType
    severity: IssueSeverity
    description: str = Field(default="")


class CategoryMetric(BaseModel):
    """Completion figures for one field category."""

    category: str
    total_fields: int = 0
    mapped_fields: int = 0
    completion_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    quality_level: str = "Insuficiente"
    critical_missing: List[str] = Field(default_factory=list)
    mapped_field_names: List[str] = Field(default_factory=list)


class ConfidenceBucket(BaseModel):
    """One bucket of the confidence histogram."""

    level: ConfidenceLevel
    field_count: int = 0
    percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    field_names: List[str] = Field(default_factory=list)
    average_confidence: float = Field(default=0.0, ge=0.0, le=100.0)


class FieldConfidence(BaseModel):
    """Confidence of a single mapped field, in percent."""

    field_name: str
    value: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    requires_attention: bool = False


class ImprovementSuggestion(BaseModel):
    """Hint for the reviewer on how to complete the record."""

    field_name: str
    message: str
    priority: str = "Media"


class MappingMetrics(BaseModel):
    """Completeness and confidence summary of one mapped document."""

    total_fields_scanned: int = 0
    fields_mapped: int = 0
    fields_missing: int = 0
    overall_completion: float = Field(default=0.0, ge=0.0, le=100.0)
    mapping_quality: str = "Insuficiente"
    categories: Dict[str, CategoryMetric] = Field(default_factory=dict)
    field_confidences: List[FieldConfidence] = Field(default_factory=list)
    confidence_buckets: List[ConfidenceBucket] = Field(default_factory=list)
    average_confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    overall_confidence_level: str = "Muy Baja"
    fields_requiring_attention: List[str] = Field(default_factory=list)
    improvement_suggestions: List[ImprovementSuggestion] = Field(default_factory=list)


class MappingResult(BaseModel):
    """Everything the orchestrator returns for one document."""

    provider_id: Optional[int] = None
    provider_name: str = ""
    policy_data: CanonicalPolicyData = Field(default_factory=CanonicalPolicyData)
    matches: Dict[str, MatchResult] = Field(default_factory=dict)
    suggestions: List[MappingSuggestion] = Field(default_factory=list)
    issues: List[MappingIssue] = Field(default_factory=list)
    metrics: MappingMetrics = Field(default_factory=MappingMetrics)
    is_complete: bool = False
    ready_for_submission: bool = False
