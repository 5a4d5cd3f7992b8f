"""Mapping issue detection for extracted policy records."""

from typing import List, Mapping, Optional

from policy_mapper.config.settings import MapperSettings, get_settings
from policy_mapper.schemas.mapping import IssueSeverity, IssueType, MappingIssue, MatchResult
from policy_mapper.schemas.policy import CanonicalPolicyData


class IssueCollector:
    """Reports missing critical data and uncertain reference matches."""

    def __init__(self, settings: Optional[MapperSettings] = None):
        self.settings = settings or get_settings()

    def collect(
        self,
        policy: CanonicalPolicyData,
        matches: Mapping[str, MatchResult],
        scanned_values: Mapping[str, str],
    ) -> List[MappingIssue]:
        """Issues for one record, in a stable order.

        Args:
            policy: Extracted record
            matches: Reference match per canonical field
            scanned_values: Text each reference field was matched from

        Returns:
            List of mapping issues
        """
        issues = self.missing_critical(policy)
        issues.extend(self.low_confidence(matches, scanned_values))
        return issues

    def missing_critical(self, policy: CanonicalPolicyData) -> List[MappingIssue]:
        issues = []
        if not policy.policy_number:
            issues.append(MappingIssue(
                field_name="policy_number",
                issue_type=IssueType.MISSING_CRITICAL,
                severity=IssueSeverity.ERROR,
                description="Número de póliza no encontrado",
            ))
        elif len(policy.policy_number) < self.settings.min_policy_number_length:
            issues.append(MappingIssue(
                field_name="policy_number",
                issue_type=IssueType.VALIDATION_ERROR,
                severity=IssueSeverity.WARNING,
                description=(
                    f"Número de póliza '{policy.policy_number}' tiene menos de "
                    f"{self.settings.min_policy_number_length} caracteres"
                ),
            ))

        for field_name, label in (("start_date", "inicio"), ("end_date", "fin")):
            if not getattr(policy, field_name):
                issues.append(MappingIssue(
                    field_name=field_name,
                    issue_type=IssueType.MISSING_CRITICAL,
                    severity=IssueSeverity.ERROR,
                    description=f"Fecha de {label} de vigencia no encontrada",
                ))

        if not policy.vehicle_brand and not policy.vehicle_model:
            issues.append(MappingIssue(
                field_name="vehicle_brand",
                issue_type=IssueType.MISSING_CRITICAL,
                severity=IssueSeverity.WARNING,
                description="Marca y modelo del vehículo no encontrados",
            ))

        if policy.premium <= 0 and policy.total_amount <= 0:
            issues.append(MappingIssue(
                field_name="premium",
                issue_type=IssueType.MISSING_CRITICAL,
                severity=IssueSeverity.WARNING,
                description="Prima y premio total no encontrados",
            ))
        return issues

    def low_confidence(
        self,
        matches: Mapping[str, MatchResult],
        scanned_values: Mapping[str, str],
    ) -> List[MappingIssue]:
        issues = []
        threshold = self.settings.low_confidence_threshold
        for field_name, match in matches.items():
            if match.confidence >= threshold:
                continue
            scanned = scanned_values.get(field_name, "")
            chosen = match.item.name if match.item else "sin valor"
            if scanned:
                severity = IssueSeverity.WARNING
                description = (
                    f"'{scanned}' asignado a '{chosen}' con confianza {match.confidence:.2f}"
                )
            else:
                severity = IssueSeverity.INFO
                description = f"Sin valor escaneado, asignado por defecto a '{chosen}'"
            issues.append(MappingIssue(
                field_name=field_name,
                issue_type=IssueType.LOW_CONFIDENCE,
                severity=severity,
                description=description,
            ))
        return issues
