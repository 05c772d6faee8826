"""
Result types passed between pipeline stages.

Each stage (fetch, decode, aggregate, validate, store) hands back a
StageResult instead of raising, so the driver decides per stage what a
failure means for the match being processed.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class StageResult:
    """Outcome of one pipeline stage: either a value or an error."""
    stage: str
    value: Any = None
    error: Optional[BaseException] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, stage: str, value: Any = None, warnings: Optional[List[str]] = None) -> "StageResult":
        return cls(stage=stage, value=value, warnings=list(warnings or []))

    @classmethod
    def failure(cls, stage: str, error: BaseException, warnings: Optional[List[str]] = None) -> "StageResult":
        return cls(stage=stage, error=error, warnings=list(warnings or []))

    def describe_error(self) -> str:
        if self.error is None:
            return ""
        return f"{self.stage}: {self.error}"


@dataclass
class IngestionResult:
    """Result of one ingestion run over a list of match URLs."""
    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    warnings: List[str] = None
    errors: List[str] = None
    processed_match_ids: List[str] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []
        if self.errors is None:
            self.errors = []
        if self.processed_match_ids is None:
            self.processed_match_ids = []
