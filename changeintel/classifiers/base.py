"""Weighted multi-category classification engine shared by all rule-sets."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from ..config import ClassificationConfig
from ..logging import get_logger
from ..models import ClassificationResult, ClassificationSummary, FileChangeRecord
from ..validation import require_change_record

MAX_SCORE = 100.0
REASON_INDICATOR_LIMIT = 3
FALLBACK_REASON = "general classification based on file type and content"

_GO_EXPORTED_FUNC = re.compile(r"^func\s+(?:\([^)]*\)\s*)?([A-Z]\w*)\s*\(", re.MULTILINE)
_IMPORT_LINE = re.compile(r"^\s*import\b|\brequire\s*\(", re.MULTILINE)


class Category(Enum):
    """Closed set of classification categories.

    Members carry ``(code, display_name, description)``; subclasses define
    the members for one rule-set.
    """

    def __init__(self, code: str, display_name: str, description: str) -> None:
        self.code = code
        self.display_name = display_name
        self.description = description


@dataclass(frozen=True)
class ClassificationContext:
    """Features derived once from a change record and shared by every rule."""

    path: str
    content: str
    methods: Tuple[str, ...] = ()
    exported_functions: Tuple[str, ...] = ()
    import_count: int = 0

    @property
    def file_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @classmethod
    def from_record(cls, record: FileChangeRecord) -> "ClassificationContext":
        content = record.content or ""
        path = "/" + record.relative_path.replace("\\", "/").lstrip("/")
        exported = [match.group(1) for match in _GO_EXPORTED_FUNC.finditer(content)]
        for name in record.methods:
            if name[:1].isupper() and name not in exported:
                exported.append(name)
        return cls(
            path=path,
            content=content,
            methods=tuple(record.methods),
            exported_functions=tuple(exported),
            import_count=len(_IMPORT_LINE.findall(content)),
        )


Rule = Callable[[FileChangeRecord, ClassificationContext, List[str]], float]


@dataclass(frozen=True)
class RuleSet:
    """Binds a category enumeration to exactly one scoring rule per category."""

    name: str
    categories: Type[Category]
    rules: Mapping[Category, Rule]

    def __post_init__(self) -> None:
        missing = [member.code for member in self.categories if member not in self.rules]
        if missing:
            raise ValueError(f"rule-set '{self.name}' has no rule for: {', '.join(missing)}")


class WeightedClassifier:
    """Scores a change record against every category and keeps the best one."""

    def __init__(self, rule_set: RuleSet, *, logger: Optional[logging.Logger] = None) -> None:
        self.rule_set = rule_set
        self._logger = logger or get_logger(f"classifiers.{rule_set.name}")

    def score(
        self, record: FileChangeRecord, context: ClassificationContext
    ) -> List[Tuple[Category, float, List[str]]]:
        """Run every rule and return ``(category, score, indicators)`` in enum order."""
        scored: List[Tuple[Category, float, List[str]]] = []
        for category in self.rule_set.categories:
            indicators: List[str] = []
            value = self.rule_set.rules[category](record, context, indicators)
            scored.append((category, max(0.0, min(float(value), MAX_SCORE)), indicators))
        return scored

    def classify(
        self,
        record: FileChangeRecord,
        context: Optional[ClassificationContext] = None,
    ) -> ClassificationResult:
        record = require_change_record(record)
        if context is None:
            context = ClassificationContext.from_record(record)

        scored = self.score(record, context)
        best_category, best_score, best_indicators = scored[0]
        for category, value, indicators in scored[1:]:
            # Strictly greater: the earliest category keeps a tie.
            if value > best_score:
                best_category, best_score, best_indicators = category, value, indicators

        self._logger.debug(
            "Classified %s as %s (%.0f)", record.relative_path, best_category.code, best_score
        )
        return ClassificationResult(
            file_path=record.relative_path,
            category=best_category.code,
            category_name=best_category.display_name,
            description=best_category.description,
            reason=build_reason(best_category, best_indicators),
            confidence=min(best_score, MAX_SCORE) / MAX_SCORE,
            indicators=list(best_indicators),
            changed_methods=list(record.methods),
        )

    def classify_many(self, records: Iterable[FileChangeRecord]) -> List[ClassificationResult]:
        return [self.classify(record) for record in records]


def build_reason(category: Category, indicators: Sequence[str]) -> str:
    if not indicators:
        return f"{category.display_name}: {FALLBACK_REASON}"
    return f"{category.display_name}: {', '.join(indicators[:REASON_INDICATOR_LIMIT])}"


def summarize_classifications(
    results: Iterable[ClassificationResult],
    config: Optional[ClassificationConfig] = None,
) -> ClassificationSummary:
    """Count results per category and per confidence bucket."""
    config = config or ClassificationConfig()
    by_category: Dict[str, int] = {}
    buckets = {"high": 0, "medium": 0, "low": 0}
    total_confidence = 0.0
    count = 0
    for result in results:
        count += 1
        total_confidence += result.confidence
        by_category[result.category] = by_category.get(result.category, 0) + 1
        if result.confidence > config.high_confidence:
            buckets["high"] += 1
        elif result.confidence > config.medium_confidence:
            buckets["medium"] += 1
        else:
            buckets["low"] += 1
    return ClassificationSummary(
        total_files=count,
        by_category=by_category,
        confidence_stats=buckets,
        average_confidence=total_confidence / count if count else 0.0,
    )


__all__ = [
    "Category",
    "ClassificationContext",
    "FALLBACK_REASON",
    "MAX_SCORE",
    "Rule",
    "RuleSet",
    "WeightedClassifier",
    "build_reason",
    "summarize_classifications",
]
