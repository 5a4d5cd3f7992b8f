from .issue_collector import IssueCollector
from .metrics_calculator import MetricsCalculator
from .orchestrator import MappingOrchestrator

__all__ = ["IssueCollector", "MetricsCalculator", "MappingOrchestrator"]
