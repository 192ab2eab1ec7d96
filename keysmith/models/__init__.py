"""Shared models used across Keysmith domains."""

from keysmith.models.base import KeysmithBaseModel
from keysmith.models.diagnostics import Diagnostic, Severity, SourceLocation, Stage
from keysmith.models.results import BaseResult


__all__ = [
    "BaseResult",
    "Diagnostic",
    "KeysmithBaseModel",
    "Severity",
    "SourceLocation",
    "Stage",
]
