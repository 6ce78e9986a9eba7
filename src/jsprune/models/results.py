"""Data models for analysis results."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from jsprune.models.bindings import BindingKind


@dataclass
class Finding:
    """An unused binding reported for a file."""

    name: str
    kind: BindingKind
    file: Path
    line: int
    column: int
    action: str = "comment"  # "remove", "comment", "prefix", "trim", "ignore"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "file": str(self.file),
            "line": self.line,
            "column": self.column,
            "action": self.action,
        }


@dataclass
class AnalysisMetadata:
    """Metadata about the analysis run."""

    project: str
    analyzed_at: datetime
    jsprune_version: str
    files_analyzed: int
    analysis_duration_ms: int

    def to_dict(self) -> dict:
        return {
            "project": self.project,
            "analyzed_at": self.analyzed_at.isoformat(),
            "jsprune_version": self.jsprune_version,
            "files_analyzed": self.files_analyzed,
            "analysis_duration_ms": self.analysis_duration_ms,
        }


@dataclass
class AnalysisSummary:
    """Summary of analysis results."""

    findings: int
    by_kind: dict[str, int] = field(default_factory=dict)
    files_with_findings: int = 0

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> "AnalysisSummary":
        by_kind = Counter(f.kind.value for f in findings)
        return cls(
            findings=len(findings),
            by_kind=dict(sorted(by_kind.items())),
            files_with_findings=len({f.file for f in findings}),
        )

    def to_dict(self) -> dict:
        return {
            "findings": self.findings,
            "by_kind": self.by_kind,
            "files_with_findings": self.files_with_findings,
        }


@dataclass
class FileError:
    """A file that could not be analyzed."""

    file: Path
    message: str

    def to_dict(self) -> dict:
        return {"file": str(self.file), "message": self.message}


@dataclass
class AnalysisResults:
    """Complete analysis results."""

    version: str = "1.0"
    metadata: AnalysisMetadata | None = None
    summary: AnalysisSummary | None = None
    findings: list[Finding] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {"version": self.version}

        if self.metadata:
            result["metadata"] = self.metadata.to_dict()

        if self.summary:
            result["summary"] = self.summary.to_dict()

        result["findings"] = [f.to_dict() for f in self.findings]
        result["errors"] = [e.to_dict() for e in self.errors]

        return result
