"""Frontend (React / Vue / JS / TS) rule-set, categories F1-F5."""

from __future__ import annotations

import re
from typing import List

from .base import Category, ClassificationContext, RuleSet, WeightedClassifier
from ..models import FileChangeRecord


class FrontendCategory(Category):
    F1 = ("F1", "Component behavior change", "Logic changes inside hooks, lifecycle or component methods")
    F2 = ("F2", "UI structure change", "Tag structure changes in JSX or templates")
    F3 = ("F3", "Style change", "Class names, inline styles, CSS modules or stylesheet edits")
    F4 = ("F4", "Interaction event change", "Event bindings such as onClick / @click and their handlers")
    F5 = ("F5", "Dependency or configuration change", "Router, store, i18n, env or build tool configuration")


# F1: component behavior
BEHAVIOR_HOOK_KEYWORDS = ("useEffect", "useState", "useCallback")
BEHAVIOR_LIFECYCLE_KEYWORDS = ("mounted", "created", "beforeDestroy")
BEHAVIOR_STATE_KEYWORDS = ("setState", "this.state", "reactive", "ref(")
BEHAVIOR_METHOD_FRAGMENTS = ("handle", "process", "fetch", "submit", "validate", "calculate")
BEHAVIOR_ASYNC_KEYWORDS = ("async", "await", ".then(", "Promise")

# F2: UI structure
STRUCTURE_ELEMENT_PATTERN = re.compile(r"<[A-Z][A-Za-z0-9]*|<[a-z][a-z0-9-]*")
STRUCTURE_ELEMENT_THRESHOLD = 5
STRUCTURE_TEMPLATE_KEYWORDS = ("<template>", "v-if", "v-for")
STRUCTURE_COMPONENT_EXTENSIONS = (".jsx", ".tsx", ".vue")
STRUCTURE_LAYOUT_ELEMENTS = ("div", "section", "article", "header", "footer", "nav", "main")
STRUCTURE_CONDITIONAL_KEYWORDS = ("v-if", "v-show")

# F3: style
STYLE_FILE_EXTENSIONS = (".css", ".scss", ".sass", ".less")
STYLE_IMPORT_MARKERS = (".css", ".scss", ".sass")
STYLE_INLINE_KEYWORDS = ("style=", "styled-components", "emotion")
STYLE_CLASSNAME_PATTERN = re.compile(r"className=[\"'`][^\"'`]*[\"'`]")
STYLE_MODULE_KEYWORDS = (".module.css", "styles.", "classes.")

# F4: interaction events
EVENT_REACT_NAMES = ("onClick", "onChange", "onSubmit", "onBlur", "onFocus", "onKeyDown", "onKeyUp")
EVENT_VUE_NAMES = ("@click", "@change", "@submit", "@blur", "@focus", "@keydown", "@keyup")
EVENT_HANDLER_FRAGMENTS = ("handle", "on", "click")
EVENT_FORM_KEYWORDS = ("form", "Form", "input", "button")

# F5: dependency / configuration
CONFIG_PACKAGE_FILES = ("package.json", "yarn.lock", "package-lock.json")
CONFIG_ROUTER_KEYWORDS = ("router", "Route", "useRouter", "useNavigate")
CONFIG_STORE_KEYWORDS = ("store", "redux", "mobx", "zustand")
CONFIG_I18N_KEYWORDS = ("i18n", "useTranslation", "t(")
CONFIG_ENV_KEYWORDS = ("process.env", "import.meta.env", ".env")
CONFIG_BUILD_TOOLS = ("webpack", "vite", "rollup", "babel")
CONFIG_IMPORT_THRESHOLD = 5


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def score_behavior(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    content = context.content
    score = 0.0
    if _contains_any(content, BEHAVIOR_HOOK_KEYWORDS):
        score += 30
        indicators.append("React hooks usage")
    if _contains_any(content, BEHAVIOR_LIFECYCLE_KEYWORDS):
        score += 30
        indicators.append("Vue lifecycle methods")
    if _contains_any(content, BEHAVIOR_STATE_KEYWORDS):
        score += 25
        indicators.append("state management logic")
    for method in context.methods:
        if _contains_any(method.lower(), BEHAVIOR_METHOD_FRAGMENTS):
            score += 15
            indicators.append(f"business method: {method}")
    if _contains_any(content, BEHAVIOR_ASYNC_KEYWORDS):
        score += 20
        indicators.append("asynchronous logic")
    return min(score, 100)


def score_structure(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    content = context.content
    score = 0.0
    elements = STRUCTURE_ELEMENT_PATTERN.findall(content)
    if len(elements) > STRUCTURE_ELEMENT_THRESHOLD:
        score += 35
        indicators.append(f"{len(elements)} JSX elements")
    if _contains_any(content, STRUCTURE_TEMPLATE_KEYWORDS):
        score += 35
        indicators.append("Vue template structure")
    if context.path.endswith(STRUCTURE_COMPONENT_EXTENSIONS):
        score += 20
        indicators.append("component file type")
    for element in STRUCTURE_LAYOUT_ELEMENTS:
        if f"<{element}" in content or f"<{element.upper()}" in content:
            score += 5
            indicators.append(f"layout element: {element}")
    if _contains_any(content, STRUCTURE_CONDITIONAL_KEYWORDS) or ("{" in content and "?" in content):
        score += 15
        indicators.append("conditional rendering")
    return min(score, 100)


def score_style(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    content = context.content
    score = 0.0
    if context.path.endswith(STYLE_FILE_EXTENSIONS):
        score += 40
        indicators.append("stylesheet file")
    if "import" in content and _contains_any(content, STYLE_IMPORT_MARKERS):
        score += 25
        indicators.append("stylesheet import")
    if _contains_any(content, STYLE_INLINE_KEYWORDS):
        score += 30
        indicators.append("inline style or CSS-in-JS")
    class_names = STYLE_CLASSNAME_PATTERN.findall(content)
    if class_names:
        score += 20
        indicators.append(f"{len(class_names)} className attributes")
    if _contains_any(content, STYLE_MODULE_KEYWORDS):
        score += 25
        indicators.append("CSS module usage")
    return min(score, 100)


def score_events(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    content = context.content
    score = 0.0
    for event in EVENT_REACT_NAMES:
        if event in content:
            score += 10
            indicators.append(f"React event: {event}")
    for event in EVENT_VUE_NAMES:
        if event in content:
            score += 10
            indicators.append(f"Vue event: {event}")
    for method in context.methods:
        if _contains_any(method.lower(), EVENT_HANDLER_FRAGMENTS):
            score += 15
            indicators.append(f"event handler: {method}")
    if _contains_any(content, EVENT_FORM_KEYWORDS):
        score += 20
        indicators.append("form elements")
    return min(score, 100)


def score_configuration(record: FileChangeRecord, context: ClassificationContext, indicators: List[str]) -> float:
    content = context.content
    score = 0.0
    if _contains_any(context.path, CONFIG_PACKAGE_FILES):
        score += 50
        indicators.append("dependency manifest")
    if _contains_any(content, CONFIG_ROUTER_KEYWORDS):
        score += 30
        indicators.append("router configuration")
    if _contains_any(content, CONFIG_STORE_KEYWORDS):
        score += 30
        indicators.append("store configuration")
    if _contains_any(content, CONFIG_I18N_KEYWORDS):
        score += 25
        indicators.append("i18n configuration")
    if _contains_any(content, CONFIG_ENV_KEYWORDS):
        score += 20
        indicators.append("environment variables")
    if _contains_any(context.path, CONFIG_BUILD_TOOLS):
        score += 35
        indicators.append("build tool configuration")
    if context.import_count > CONFIG_IMPORT_THRESHOLD:
        score += 10
        indicators.append(f"{context.import_count} imports")
    return min(score, 100)


FRONTEND_RULES = RuleSet(
    name="frontend",
    categories=FrontendCategory,
    rules={
        FrontendCategory.F1: score_behavior,
        FrontendCategory.F2: score_structure,
        FrontendCategory.F3: score_style,
        FrontendCategory.F4: score_events,
        FrontendCategory.F5: score_configuration,
    },
)


def frontend_classifier(**kwargs) -> WeightedClassifier:
    return WeightedClassifier(FRONTEND_RULES, **kwargs)


__all__ = ["FRONTEND_RULES", "FrontendCategory", "frontend_classifier"]
