"""Fine-grained change analysis for frontend files.

Three passes run over a change record:

* a file-type pass keyed on the path alone (stylesheets, manifests, tests,
  build and env configuration, type declarations);
* a method-level pass when the diff provider supplied changed method names;
* otherwise a line-level pass over the unified diff. Each ``+``/``-`` line
  goes through a fixed-priority detector list and receives the label of the
  first detector that matches. When no line matches anything, the same
  detectors run once over the whole diff and report file-level changes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .base import Category
from ..logging import get_logger
from ..models import FileChangeRecord, GranularChange
from ..validation import require_change_record


class ModificationType(Category):
    COMPONENT_LOGIC_CHANGE = ("component-logic-change", "Component logic change", "Business logic or state handling inside a component changed")
    HOOK_CHANGE = ("hook-change", "Hook change", "A React hook or Vue composition API call changed")
    HOOK_DEPENDENCY_CHANGE = ("hook-dependency-change", "Hook dependency change", "The dependency array of a React hook changed")
    LIFECYCLE_CHANGE = ("lifecycle-change", "Lifecycle change", "A component lifecycle method changed")
    STATE_MANAGEMENT_CHANGE = ("state-management-change", "State management change", "State management logic (Redux / Vuex / Pinia / setState) changed")
    JSX_STRUCTURE_CHANGE = ("jsx-structure-change", "JSX structure change", "JSX or template element structure changed")
    COMPONENT_PROPS_CHANGE = ("component-props-change", "Component props change", "Component props or their interface changed")
    CSS_CHANGE = ("css-change", "CSS change", "A CSS / SCSS / Less stylesheet changed")
    EVENT_HANDLER_CHANGE = ("event-handler-change", "Event handler change", "An event handler or event binding changed")
    API_CALL_CHANGE = ("api-call-change", "API call change", "API call or data fetching logic changed")
    BUILD_CONFIG_CHANGE = ("build-config-change", "Build configuration change", "webpack / vite / rollup or similar build configuration changed")
    PACKAGE_DEPENDENCY_CHANGE = ("package-dependency-change", "Package dependency change", "package.json dependencies or a lockfile changed")
    ENV_CONFIG_CHANGE = ("env-config-change", "Environment configuration change", "Environment variables or env files changed")
    UNIT_TEST_CHANGE = ("unit-test-change", "Unit test change", "A unit test file changed")
    E2E_TEST_CHANGE = ("e2e-test-change", "E2E test change", "An end-to-end test changed")
    TYPE_DEFINITION_CHANGE = ("type-definition-change", "Type definition change", "A TypeScript declaration file changed")


# File-type pass
STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less", ".styl", ".stylus")
DEPENDENCY_FILES = ("package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml")
TEST_PATTERNS = (
    re.compile(r"\.test\.(js|jsx|ts|tsx)$"),
    re.compile(r"\.spec\.(js|jsx|ts|tsx)$"),
    re.compile(r"/__tests__/"),
    re.compile(r"/test/"),
    re.compile(r"/tests/"),
)
E2E_MARKERS = ("e2e", "cypress", "playwright")
BUILD_CONFIG_FILES = (
    "webpack.config.js",
    "vite.config.js",
    "rollup.config.js",
    "babel.config.js",
    ".babelrc",
    "tsconfig.json",
    "jest.config.js",
    "vitest.config.js",
)
BUILD_CONFIG_PREFIXES = ("webpack.", "vite.")
ENV_FILES = (".env", ".env.local", ".env.development", ".env.production")

# Method-level pass
HOOK_METHOD_PATTERN = re.compile(r"^use[A-Z]")
LIFECYCLE_METHODS = (
    "componentDidMount",
    "componentDidUpdate",
    "componentWillUnmount",
    "created",
    "mounted",
    "updated",
    "destroyed",
    "beforeDestroy",
)
EVENT_METHOD_PATTERN = re.compile(r"^(on[A-Z]|handle)")
EVENT_METHOD_FRAGMENTS = ("click", "submit", "change", "focus", "blur")
API_METHOD_FRAGMENTS = ("fetch", "get", "post", "put", "delete", "request", "api", "call")
STATE_METHOD_FRAGMENTS = ("state", "store", "dispatch", "commit", "mutation", "action")
COMPONENT_EXTENSIONS = (".jsx", ".tsx", ".vue")

# Line-level pass, in priority order
HOOK_DEPENDENCY_PATTERN = re.compile(
    r"\b(useEffect|useLayoutEffect|useInsertionEffect|useCallback|useMemo|useImperativeHandle)"
    r"\s*\(.*?,\s*\[([^\[\]]*)\]\s*\)"
)
TRAILING_DEPENDENCY_PATTERN = re.compile(r"^\s*\}\s*,\s*\[([^\[\]]*)\]\s*\)", re.MULTILINE)
HOOK_CALL_PATTERN = re.compile(r"\b(use[A-Z]\w*)\s*\(")
JSX_ELEMENT_PATTERN = re.compile(r"(?<![\w$.])<(/?)([A-Za-z][\w.\-]*)(?=[\s/>]|$)", re.MULTILINE)
EVENT_PATTERN = re.compile(
    r"(?<![\w$])(on[A-Z][A-Za-z]+)\s*="
    r"|@([a-zA-Z][\w-]*)="
    r"|v-on:([\w-]+)="
    r"|addEventListener\(\s*['\"]([\w-]+)['\"]"
)
PROPS_PATTERNS = (
    re.compile(r"\bprops\.(\w+)"),
    re.compile(r"\b(?:interface|type)\s+(\w*Props)\b"),
    re.compile(r"\b(defineProps)\b"),
    re.compile(r"\b(PropTypes)\."),
)
STATE_PATTERN = re.compile(
    r"\bsetState\s*\("
    r"|\bthis\.state\b"
    r"|\bdispatch\s*\("
    r"|\bstore\."
    r"|\bcommit\s*\("
    r"|\b(?i:redux|vuex|pinia)\b"
    r"|\bset(?!Timeout|Interval|Immediate)[A-Z]\w*\s*\("
)
API_PATTERN = re.compile(
    r"\bfetch\s*\("
    r"|\baxios\b"
    r"|\.(?:get|post|put|patch|delete)\s*\("
    r"|\bapi\."
    r"|\$http\."
    r"|\.then\s*\("
    r"|\bawait\s+[\w.$]+\s*\("
)
HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")

LINE_CONFIDENCE: Dict[ModificationType, float] = {
    ModificationType.HOOK_DEPENDENCY_CHANGE: 0.9,
    ModificationType.HOOK_CHANGE: 0.85,
    ModificationType.JSX_STRUCTURE_CHANGE: 0.8,
    ModificationType.EVENT_HANDLER_CHANGE: 0.85,
    ModificationType.COMPONENT_PROPS_CHANGE: 0.8,
    ModificationType.STATE_MANAGEMENT_CHANGE: 0.75,
    ModificationType.API_CALL_CHANGE: 0.7,
}
FILE_LEVEL_CONFIDENCE = 0.6

Detection = Tuple[ModificationType, str, Dict[str, Any]]
Detector = Callable[[str], Optional[Detection]]


@dataclass(frozen=True)
class DiffLine:
    kind: str
    text: str
    line_number: Optional[int]


def iter_diff_lines(diff_text: str) -> Iterator[DiffLine]:
    """Yield added and removed lines, tracking numbers through hunk headers."""
    old_line: Optional[int] = None
    new_line: Optional[int] = None
    for raw in diff_text.splitlines():
        if raw.startswith(("+++", "---")):
            continue
        hunk = HUNK_HEADER.match(raw)
        if hunk:
            old_line, new_line = int(hunk.group(1)), int(hunk.group(2))
            continue
        if raw.startswith("+"):
            yield DiffLine("added", raw[1:], new_line)
            new_line = new_line + 1 if new_line is not None else None
        elif raw.startswith("-"):
            yield DiffLine("removed", raw[1:], old_line)
            old_line = old_line + 1 if old_line is not None else None
        elif raw.startswith("\\"):
            continue
        else:
            old_line = old_line + 1 if old_line is not None else None
            new_line = new_line + 1 if new_line is not None else None


def _split_dependencies(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def detect_hook_dependencies(text: str) -> Optional[Detection]:
    match = HOOK_DEPENDENCY_PATTERN.search(text)
    if match:
        hook, deps = match.group(1), _split_dependencies(match.group(2))
        return (
            ModificationType.HOOK_DEPENDENCY_CHANGE,
            f"{hook} dependency array: [{', '.join(deps)}]",
            {"hook": hook, "dependencies": deps},
        )
    match = TRAILING_DEPENDENCY_PATTERN.search(text)
    if match:
        deps = _split_dependencies(match.group(1))
        return (
            ModificationType.HOOK_DEPENDENCY_CHANGE,
            f"hook dependency array: [{', '.join(deps)}]",
            {"hook": None, "dependencies": deps},
        )
    return None


def detect_hook_call(text: str) -> Optional[Detection]:
    match = HOOK_CALL_PATTERN.search(text)
    if match is None:
        return None
    return ModificationType.HOOK_CHANGE, f"hook call: {match.group(1)}", {"hook": match.group(1)}


def detect_jsx_element(text: str) -> Optional[Detection]:
    match = JSX_ELEMENT_PATTERN.search(text)
    if match is None:
        return None
    element = match.group(2)
    return (
        ModificationType.JSX_STRUCTURE_CHANGE,
        f"JSX element: <{match.group(1)}{element}>",
        {"element": element, "closing": bool(match.group(1))},
    )


def detect_event_binding(text: str) -> Optional[Detection]:
    match = EVENT_PATTERN.search(text)
    if match is None:
        return None
    event = next(group for group in match.groups() if group)
    return ModificationType.EVENT_HANDLER_CHANGE, f"event binding: {event}", {"event": event}


def detect_props(text: str) -> Optional[Detection]:
    for pattern in PROPS_PATTERNS:
        match = pattern.search(text)
        if match:
            return ModificationType.COMPONENT_PROPS_CHANGE, f"props: {match.group(1)}", {"prop": match.group(1)}
    return None


def detect_state(text: str) -> Optional[Detection]:
    match = STATE_PATTERN.search(text)
    if match is None:
        return None
    keyword = match.group(0).rstrip("( ")
    return ModificationType.STATE_MANAGEMENT_CHANGE, f"state management: {keyword}", {"keyword": keyword}


def detect_api_call(text: str) -> Optional[Detection]:
    match = API_PATTERN.search(text)
    if match is None:
        return None
    keyword = match.group(0).rstrip("( ")
    return ModificationType.API_CALL_CHANGE, f"API call: {keyword}", {"keyword": keyword}


LINE_DETECTORS: Tuple[Detector, ...] = (
    detect_hook_dependencies,
    detect_hook_call,
    detect_jsx_element,
    detect_event_binding,
    detect_props,
    detect_state,
    detect_api_call,
)


class GranularAnalyzer:
    """Produces :class:`GranularChange` entries for one change record."""

    def __init__(
        self,
        detectors: Tuple[Detector, ...] = LINE_DETECTORS,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.detectors = detectors
        self._logger = logger or get_logger("classifiers.granular")

    def analyze(self, record: FileChangeRecord) -> List[GranularChange]:
        record = require_change_record(record)
        path = record.relative_path
        changes = self.analyze_file_type(path)
        if record.methods:
            for method in record.methods:
                changes.extend(self.analyze_method(path, method))
        elif record.diff_text:
            changes.extend(self.analyze_diff(path, record.diff_text))
        self._logger.debug("Granular analysis of %s produced %d changes", path, len(changes))
        return changes

    def analyze_file_type(self, path: str) -> List[GranularChange]:
        name = PurePosixPath(path).name
        slashed = "/" + path.lstrip("/")
        found: List[ModificationType] = []
        if path.endswith(STYLE_EXTENSIONS):
            found.append(ModificationType.CSS_CHANGE)
        if name in DEPENDENCY_FILES:
            found.append(ModificationType.PACKAGE_DEPENDENCY_CHANGE)
        if any(pattern.search(slashed) for pattern in TEST_PATTERNS):
            if any(marker in slashed for marker in E2E_MARKERS):
                found.append(ModificationType.E2E_TEST_CHANGE)
            else:
                found.append(ModificationType.UNIT_TEST_CHANGE)
        if name in BUILD_CONFIG_FILES or name.startswith(BUILD_CONFIG_PREFIXES):
            found.append(ModificationType.BUILD_CONFIG_CHANGE)
        if name in ENV_FILES or name.startswith(".env."):
            found.append(ModificationType.ENV_CONFIG_CHANGE)
        if path.endswith(".d.ts"):
            found.append(ModificationType.TYPE_DEFINITION_CHANGE)
        return [
            _change(kind, f"{kind.display_name}: {name}", path, details={"scope": "file"})
            for kind in found
        ]

    def analyze_method(self, path: str, method: str) -> List[GranularChange]:
        lowered = method.lower()
        checks = (
            (HOOK_METHOD_PATTERN.match(method) is not None, ModificationType.HOOK_CHANGE, 0.9),
            (method in LIFECYCLE_METHODS, ModificationType.LIFECYCLE_CHANGE, 0.95),
            (
                EVENT_METHOD_PATTERN.match(method) is not None
                or any(fragment in lowered for fragment in EVENT_METHOD_FRAGMENTS),
                ModificationType.EVENT_HANDLER_CHANGE,
                0.85,
            ),
            (any(fragment in lowered for fragment in API_METHOD_FRAGMENTS), ModificationType.API_CALL_CHANGE, 0.8),
            (any(fragment in lowered for fragment in STATE_METHOD_FRAGMENTS), ModificationType.STATE_MANAGEMENT_CHANGE, 0.85),
            (path.endswith(COMPONENT_EXTENSIONS), ModificationType.COMPONENT_LOGIC_CHANGE, 0.7),
        )
        return [
            _change(kind, f"{kind.display_name}: {method}", path, method=method, confidence=confidence)
            for matched, kind, confidence in checks
            if matched
        ]

    def analyze_diff(self, path: str, diff_text: str) -> List[GranularChange]:
        changes: List[GranularChange] = []
        for line in iter_diff_lines(diff_text):
            if not line.text.strip():
                continue
            detection = self._first_detection(line.text)
            if detection is None:
                continue
            kind, description, details = detection
            changes.append(
                _change(
                    kind,
                    f"{line.kind} {description}",
                    path,
                    line_number=line.line_number,
                    line_kind=line.kind,
                    confidence=LINE_CONFIDENCE.get(kind, FILE_LEVEL_CONFIDENCE),
                    details=details,
                )
            )
        if changes:
            return changes
        return self._file_level(path, diff_text)

    def _first_detection(self, text: str) -> Optional[Detection]:
        for detector in self.detectors:
            detection = detector(text)
            if detection is not None:
                return detection
        return None

    def _file_level(self, path: str, diff_text: str) -> List[GranularChange]:
        body = "\n".join(
            raw[1:] if raw[:1] in ("+", "-", " ") else raw
            for raw in diff_text.splitlines()
            if not raw.startswith(("+++", "---", "@@", "\\"))
        )
        changes: List[GranularChange] = []
        for detector in self.detectors:
            detection = detector(body)
            if detection is None:
                continue
            kind, description, details = detection
            changes.append(
                _change(
                    kind,
                    description,
                    path,
                    confidence=FILE_LEVEL_CONFIDENCE,
                    details={**details, "scope": "file"},
                )
            )
        return changes


def _change(
    kind: ModificationType,
    description: str,
    path: str,
    *,
    line_number: Optional[int] = None,
    line_kind: Optional[str] = None,
    method: Optional[str] = None,
    confidence: float = 1.0,
    details: Optional[Dict[str, Any]] = None,
) -> GranularChange:
    return GranularChange(
        type=kind.code,
        type_name=kind.display_name,
        description=description,
        file_path=path,
        line_number=line_number,
        line_kind=line_kind,
        method=method,
        confidence=confidence,
        details=dict(details or {}),
    )


__all__ = [
    "DiffLine",
    "GranularAnalyzer",
    "LINE_DETECTORS",
    "ModificationType",
    "iter_diff_lines",
]
