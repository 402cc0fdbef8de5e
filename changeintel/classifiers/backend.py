"""Backend (Go / Java) rule-set, categories A1-A5.

Scores come from three signals: the directory the file lives in, the
names of its exported functions and a handful of content keywords.
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from .base import Category, ClassificationContext, RuleSet, WeightedClassifier
from ..models import FileChangeRecord

DIRECTORY_POINTS = 40
FUNCTION_POINTS = 15
KEYWORD_POINTS = 20
EXPORTED_FUNCTION_BONUS = 10


class BackendCategory(Category):
    A1 = ("A1", "Business logic change", "Changes to core business rules and service logic")
    A2 = ("A2", "Interface change", "Changes to API handlers, controllers or RPC endpoints")
    A3 = ("A3", "Data structure change", "Changes to models, entities, DTOs or persistence mappings")
    A4 = ("A4", "Middleware, framework or configuration change", "Changes to middleware, bootstrapping or configuration")
    A5 = ("A5", "Non-functional change", "Changes to logging, utilities, formatting or tests")


# A1: business logic
BUSINESS_DIRECTORIES = ("/service/", "/services/", "/logic/", "/biz/", "/usecase/", "/domain/")
BUSINESS_FUNCTIONS = re.compile(r"^(Process|Handle|Execute|Calculate|Validate|Apply)")
BUSINESS_KEYWORDS = ("transaction", "Transaction", "calculate", "validate")

# A2: interface
INTERFACE_DIRECTORIES = ("/api/", "/handler/", "/handlers/", "/controller/", "/controllers/", "/router/", "/grpc/")
INTERFACE_FUNCTIONS = re.compile(r"(Handler|Endpoint|Controller)$|^Serve")
INTERFACE_KEYWORDS = ("http.HandleFunc", "gin.Context", "echo.Context", "@RestController", "@RequestMapping", "@GetMapping", "@PostMapping")

# A3: data structure
DATA_DIRECTORIES = ("/model/", "/models/", "/entity/", "/dto/", "/schema/", "/dao/", "/repository/")
DATA_FUNCTIONS = re.compile(r"^(New|To|From)[A-Z]")
DATA_KEYWORDS = ("@Entity", "@Table", "gorm:", "json:\"", "db:\"")
DATA_STRUCT_PATTERN = re.compile(r"\btype\s+\w+\s+struct\b")

# A4: middleware / framework / configuration
CONFIG_DIRECTORIES = ("/config/", "/configs/", "/middleware/", "/interceptor/", "/bootstrap/")
CONFIG_FILE_NAMES = ("main.go", "go.mod", "go.sum", "application.yml", "application.properties", "pom.xml")
CONFIG_FUNCTIONS = re.compile(r"^(Init|Setup|Register|Configure|Load)")
CONFIG_KEYWORDS = ("middleware", "viper.", "@Configuration", "@Bean", "os.Getenv")

# A5: non-functional
NONFUNCTIONAL_DIRECTORIES = ("/util/", "/utils/", "/common/", "/log/", "/logger/", "/pkg/helper/")
NONFUNCTIONAL_FILE_SUFFIXES = ("_test.go", "Test.java")
NONFUNCTIONAL_FUNCTIONS = re.compile(r"^(Log|Format|Test|Benchmark|Must)")
NONFUNCTIONAL_KEYWORDS = ("log.", "logger.", "zap.", "logrus", "prometheus")


def _directory_score(
    context: ClassificationContext,
    directories: Sequence[str],
    indicators: List[str],
) -> float:
    for directory in directories:
        if directory in context.path:
            indicators.append(f"directory convention: {directory}")
            return DIRECTORY_POINTS
    return 0.0


def _function_score(
    context: ClassificationContext,
    pattern: re.Pattern,
    indicators: List[str],
) -> float:
    score = 0.0
    for name in context.exported_functions:
        if pattern.search(name):
            score += FUNCTION_POINTS
            indicators.append(f"exported function: {name}")
    return score


def _keyword_score(
    context: ClassificationContext,
    keywords: Tuple[str, ...],
    label: str,
    indicators: List[str],
) -> float:
    if any(keyword in context.content for keyword in keywords):
        indicators.append(label)
        return KEYWORD_POINTS
    return 0.0


def score_business(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    score = _directory_score(context, BUSINESS_DIRECTORIES, indicators)
    score += _function_score(context, BUSINESS_FUNCTIONS, indicators)
    score += _keyword_score(context, BUSINESS_KEYWORDS, "business rule keywords", indicators)
    return min(score, 100)


def score_interface(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    score = _directory_score(context, INTERFACE_DIRECTORIES, indicators)
    score += _function_score(context, INTERFACE_FUNCTIONS, indicators)
    score += _keyword_score(context, INTERFACE_KEYWORDS, "HTTP or RPC framework usage", indicators)
    if context.exported_functions:
        score += EXPORTED_FUNCTION_BONUS
        indicators.append(f"{len(context.exported_functions)} exported functions")
    return min(score, 100)


def score_data(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    score = _directory_score(context, DATA_DIRECTORIES, indicators)
    score += _function_score(context, DATA_FUNCTIONS, indicators)
    score += _keyword_score(context, DATA_KEYWORDS, "persistence or serialization tags", indicators)
    if DATA_STRUCT_PATTERN.search(context.content):
        score += KEYWORD_POINTS
        indicators.append("struct type definitions")
    return min(score, 100)


def score_configuration(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    score = _directory_score(context, CONFIG_DIRECTORIES, indicators)
    if context.file_name in CONFIG_FILE_NAMES:
        score += DIRECTORY_POINTS
        indicators.append(f"configuration file: {context.file_name}")
    score += _function_score(context, CONFIG_FUNCTIONS, indicators)
    score += _keyword_score(context, CONFIG_KEYWORDS, "middleware or configuration keywords", indicators)
    return min(score, 100)


def score_nonfunctional(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    score = _directory_score(context, NONFUNCTIONAL_DIRECTORIES, indicators)
    if context.file_name.endswith(NONFUNCTIONAL_FILE_SUFFIXES):
        score += DIRECTORY_POINTS
        indicators.append("test file")
    score += _function_score(context, NONFUNCTIONAL_FUNCTIONS, indicators)
    score += _keyword_score(context, NONFUNCTIONAL_KEYWORDS, "logging or metrics usage", indicators)
    return min(score, 100)


BACKEND_RULES = RuleSet(
    name="backend",
    categories=BackendCategory,
    rules={
        BackendCategory.A1: score_business,
        BackendCategory.A2: score_interface,
        BackendCategory.A3: score_data,
        BackendCategory.A4: score_configuration,
        BackendCategory.A5: score_nonfunctional,
    },
)


def backend_classifier(**kwargs) -> WeightedClassifier:
    return WeightedClassifier(BACKEND_RULES, **kwargs)


__all__ = ["BACKEND_RULES", "BackendCategory", "backend_classifier"]
