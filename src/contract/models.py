"""Artifact models exposed at the contract boundary."""

from artifacts.models.artifacts.call_chains import CallChainRecord
from artifacts.models.artifacts.classes import ClassRecord
from artifacts.models.artifacts.extraction_summary import ExtractionSummary
from artifacts.models.artifacts.functions import FunctionRecord
from artifacts.models.artifacts.imports import ExportRecord, ImportRecord

__all__ = [
    "CallChainRecord",
    "ClassRecord",
    "ExportRecord",
    "ExtractionSummary",
    "FunctionRecord",
    "ImportRecord",
]
