"""Data models for jsprune."""

from jsprune.models.bindings import (
    BindingKind,
    ImportDescriptor,
    NamedSpecifier,
    UnusedBindingRecord,
)
from jsprune.models.results import (
    AnalysisMetadata,
    AnalysisResults,
    AnalysisSummary,
    FileError,
    Finding,
)

__all__ = [
    # Binding models
    "BindingKind",
    "ImportDescriptor",
    "NamedSpecifier",
    "UnusedBindingRecord",
    # Results models
    "AnalysisMetadata",
    "AnalysisResults",
    "AnalysisSummary",
    "FileError",
    "Finding",
]
