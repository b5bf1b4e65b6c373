"""Data-quality issue reporting."""

from .issues import ValidationIssue, ValidationSeverity

__all__ = ["ValidationIssue", "ValidationSeverity"]
