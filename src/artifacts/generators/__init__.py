"""Artifact generators for drift-unified."""

from artifacts.generators.call_chains import CallChainsGenerator
from artifacts.generators.classes import ClassesGenerator
from artifacts.generators.functions import FunctionsGenerator
from artifacts.generators.imports import ExportsGenerator, ImportsGenerator
from artifacts.generators.summary import SummaryGenerator

__all__ = [
    "CallChainsGenerator",
    "ClassesGenerator",
    "ExportsGenerator",
    "FunctionsGenerator",
    "ImportsGenerator",
    "SummaryGenerator",
]
