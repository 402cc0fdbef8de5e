"""Tests for the granular (line/method/file-type) change analyzer."""

from __future__ import annotations

import pytest

from changeintel.classifiers import GranularAnalyzer, ModificationType
from changeintel.classifiers.granular import iter_diff_lines
from changeintel.errors import InputValidationError
from changeintel.models import FileChangeRecord


def _analyze(path: str, diff: str = "", methods=(), content: str = ""):
    record = FileChangeRecord(relative_path=path, diff_text=diff, content=content, methods=tuple(methods))
    return GranularAnalyzer().analyze(record)


def test_hook_dependency_array_short_circuits_other_detectors() -> None:
    [change] = _analyze("src/App.jsx", "+  useEffect(() => {...}, [a, b])")

    assert change.type == ModificationType.HOOK_DEPENDENCY_CHANGE.code
    assert change.details == {"hook": "useEffect", "dependencies": ["a", "b"]}
    assert change.line_kind == "added"
    assert "useEffect" in change.description
    assert "[a, b]" in change.description


def test_first_matching_detector_labels_each_line() -> None:
    diff = "\n".join(
        [
            "--- a/src/App.jsx",
            "+++ b/src/App.jsx",
            "@@ -10,4 +10,5 @@",
            " function App(props) {",
            "-  const [n, setN] = useState(0);",
            "+  <Modal onClose={close} />",
            "+  <button onClick={go}>",
            "+  return props.title;",
            "+  dispatch(save());",
            "+  fetch('/api/items');",
            "   }",
        ]
    )

    changes = _analyze("src/App.jsx", diff)

    assert [change.type for change in changes] == [
        "hook-change",
        "jsx-structure-change",
        "jsx-structure-change",
        "component-props-change",
        "state-management-change",
        "api-call-change",
    ]
    assert [change.line_kind for change in changes] == ["removed"] + ["added"] * 5
    assert [change.line_number for change in changes] == [11, 11, 12, 13, 14, 15]
    assert changes[1].details["element"] == "Modal"


def test_event_binding_without_markup() -> None:
    [change] = _analyze("src/a.vue", "+ v-on:keyup=\"submit\"")

    assert change.type == "event-handler-change"
    assert change.details == {"event": "keyup"}


def test_set_timeout_is_not_state_management() -> None:
    [change] = _analyze("src/a.js", "+ setTimeout(tick, 10).then(done)")

    assert change.type == "api-call-change"


def test_header_lines_are_ignored() -> None:
    diff = "--- a/useThing.js\n+++ b/useThing.js\n+const x = 1;"

    changes = _analyze("src/value.js", diff)

    assert changes == []


def test_file_level_fallback_only_when_no_line_matches() -> None:
    diff = "@@ -1,2 +1,2 @@\n-let total = 0\n+let total = 1\n useMemo(() => total, [total])\n"

    changes = _analyze("src/calc.js", diff)

    assert [change.type for change in changes] == ["hook-dependency-change", "hook-change"]
    assert all(change.line_number is None for change in changes)
    assert all(change.details["scope"] == "file" for change in changes)


def test_method_level_pass_replaces_line_analysis() -> None:
    changes = _analyze(
        "src/Widget.tsx",
        "+ fetch('/x')",
        methods=["useToggle", "componentDidMount", "handleClick"],
    )

    by_method = {}
    for change in changes:
        by_method.setdefault(change.method, []).append(change.type)

    assert by_method["useToggle"] == ["hook-change", "component-logic-change"]
    assert by_method["componentDidMount"] == ["lifecycle-change", "component-logic-change"]
    assert by_method["handleClick"] == ["event-handler-change", "component-logic-change"]
    assert all(change.line_number is None for change in changes)
    hook = next(change for change in changes if change.type == "hook-change")
    assert hook.confidence == pytest.approx(0.9)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/styles/site.scss", "css-change"),
        ("package.json", "package-dependency-change"),
        ("src/__tests__/App.test.tsx", "unit-test-change"),
        ("e2e/tests/login.spec.ts", "e2e-test-change"),
        ("vite.config.ts", "build-config-change"),
        (".env.production", "env-config-change"),
        ("types/global.d.ts", "type-definition-change"),
    ],
)
def test_file_type_pass(path: str, expected: str) -> None:
    types = [change.type for change in _analyze(path)]

    assert expected in types


def test_serialised_shape() -> None:
    [change] = _analyze("src/App.jsx", "@@ -1 +5 @@\n+useState(1)")

    assert change.to_dict() == {
        "type": "hook-change",
        "typeName": "Hook change",
        "description": "added hook call: useState",
        "filePath": "src/App.jsx",
        "lineNumber": 5,
        "lineKind": "added",
        "method": None,
        "confidence": pytest.approx(0.85),
        "details": {"hook": "useState"},
    }


def test_iter_diff_lines_without_hunks_has_no_numbers() -> None:
    lines = list(iter_diff_lines("+a\n-b\n c\n\\ No newline at end of file"))

    assert [(line.kind, line.text, line.line_number) for line in lines] == [
        ("added", "a", None),
        ("removed", "b", None),
    ]


def test_rejects_non_record_input() -> None:
    with pytest.raises(InputValidationError):
        GranularAnalyzer().analyze("src/App.jsx")  # type: ignore[arg-type]
