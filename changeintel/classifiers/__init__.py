"""Weighted change classification, granular change analysis and file importance."""

from __future__ import annotations

from typing import Dict

from .backend import BACKEND_RULES, BackendCategory, backend_classifier
from .base import (
    Category,
    ClassificationContext,
    RuleSet,
    WeightedClassifier,
    build_reason,
    summarize_classifications,
)
from .frontend import FRONTEND_RULES, FrontendCategory, frontend_classifier
from .granular import GranularAnalyzer, ModificationType
from .importance import (
    ImportanceLevel,
    rank_file_importance,
    score_file_importance,
    select_important_files,
)
from ..errors import InputValidationError

RULE_SETS: Dict[str, RuleSet] = {
    FRONTEND_RULES.name: FRONTEND_RULES,
    BACKEND_RULES.name: BACKEND_RULES,
}


def classifier_for(rule_set: str) -> WeightedClassifier:
    """Return a classifier for a rule-set name (``frontend`` or ``backend``)."""
    try:
        return WeightedClassifier(RULE_SETS[rule_set.lower()])
    except KeyError as exc:
        known = ", ".join(sorted(RULE_SETS))
        raise InputValidationError(f"Unknown rule-set '{rule_set}'. Expected one of: {known}") from exc


__all__ = [
    "BACKEND_RULES",
    "BackendCategory",
    "Category",
    "ClassificationContext",
    "FRONTEND_RULES",
    "FrontendCategory",
    "GranularAnalyzer",
    "ImportanceLevel",
    "ModificationType",
    "RULE_SETS",
    "RuleSet",
    "WeightedClassifier",
    "backend_classifier",
    "build_reason",
    "classifier_for",
    "frontend_classifier",
    "rank_file_importance",
    "score_file_importance",
    "select_important_files",
    "summarize_classifications",
]
