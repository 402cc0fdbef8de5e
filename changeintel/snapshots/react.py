"""React component snapshot extractor backed by tree-sitter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .base import SnapshotExtractor
from ..errors import ParseError
from ..models import ComponentSnapshot, Framework

_TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())
_TYPESCRIPT_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

_HOOK_CALL = re.compile(r"(use[A-Z]\w*)\s*\(")
_JSX_TAG = re.compile(r"<([A-Za-z][A-Za-z0-9]*)[^>]*?>")
_EVENT_BINDING = re.compile(r"(?<![\w$])(on[A-Z][A-Za-z]+)\s*=|\.addEventListener\(")

_FUNCTION_NODES = {"function_declaration", "generator_function_declaration"}
_CLASS_NODES = {"class_declaration", "abstract_class_declaration"}
_VARIABLE_NODES = {"lexical_declaration", "variable_declaration"}
_DEFAULT_EXPORT_FUNCTIONS = {"function_expression", "function"}


@dataclass
class _Candidate:
    name: str
    parameters: List[str]
    body: str


class ReactSnapshotExtractor(SnapshotExtractor):
    """Finds top-level React function, arrow and class components."""

    framework = Framework.REACT
    extensions = frozenset({".js", ".jsx", ".ts", ".tsx"})

    def extract(self, file_path: str, source: str) -> List[ComponentSnapshot]:
        source_bytes = source.encode("utf-8")
        parser = Parser(self._language_for(file_path))
        tree = parser.parse(source_bytes)
        root = tree.root_node
        if root is None:
            raise ParseError(file_path, "tree-sitter returned no syntax tree")

        snapshots: List[ComponentSnapshot] = []
        for candidate in self._candidates(root.named_children, source_bytes):
            # JSX heuristic: anything rendering markup is treated as a component.
            if "<" not in candidate.body:
                continue
            snapshots.append(
                ComponentSnapshot(
                    component_name=candidate.name,
                    framework=Framework.REACT,
                    file_path=file_path,
                    props=frozenset(candidate.parameters),
                    hooks_or_lifecycle=extract_hooks(candidate.body),
                    event_bindings=extract_event_bindings(candidate.body),
                    render_elements=extract_render_elements(candidate.body),
                )
            )
        return snapshots

    @staticmethod
    def _language_for(file_path: str) -> Language:
        # Angle-bracket type assertions only parse with the plain TypeScript grammar.
        if file_path.lower().endswith(".ts"):
            return _TYPESCRIPT_LANGUAGE
        return _TSX_LANGUAGE

    def _candidates(self, nodes: Sequence[Node], source_bytes: bytes) -> Iterator[_Candidate]:
        for node in nodes:
            if node.type == "export_statement":
                declaration = node.child_by_field_name("declaration")
                if declaration is None:
                    declaration = node.child_by_field_name("value")
                if declaration is None:
                    continue
                node = declaration

            candidate: Optional[_Candidate] = None
            if node.type in _FUNCTION_NODES or node.type in _DEFAULT_EXPORT_FUNCTIONS:
                candidate = self._from_function(node, source_bytes)
            elif node.type in _VARIABLE_NODES:
                candidate = self._from_variable(node, source_bytes)
            elif node.type in _CLASS_NODES or node.type == "class":
                candidate = self._from_class(node, source_bytes)

            if candidate is not None and candidate.name:
                yield candidate

    def _from_function(self, node: Node, source_bytes: bytes) -> _Candidate:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        return _Candidate(
            name=_node_text(name_node, source_bytes) if name_node else "Anonymous",
            parameters=_parameter_names(node, source_bytes),
            body=_node_text(body, source_bytes) if body else "",
        )

    def _from_variable(self, node: Node, source_bytes: bytes) -> Optional[_Candidate]:
        declarators = [child for child in node.named_children if child.type == "variable_declarator"]
        if not declarators:
            return None
        declarator = declarators[0]
        name_node = declarator.child_by_field_name("name")
        name = _node_text(name_node, source_bytes) if name_node else ""
        value = declarator.child_by_field_name("value")
        if value is None or value.type != "arrow_function":
            return _Candidate(name=name, parameters=[], body="")
        body = value.child_by_field_name("body")
        return _Candidate(
            name=name,
            parameters=_parameter_names(value, source_bytes),
            body=_node_text(body, source_bytes) if body else "",
        )

    def _from_class(self, node: Node, source_bytes: bytes) -> _Candidate:
        name_node = node.child_by_field_name("name")
        return _Candidate(
            name=_node_text(name_node, source_bytes) if name_node else "AnonymousClass",
            parameters=["props"],
            body=_node_text(node, source_bytes),
        )


def extract_hooks(text: str) -> frozenset[str]:
    """Return every ``useXxx(`` call name found in *text*."""
    return frozenset(match.group(1) for match in _HOOK_CALL.finditer(text))


def extract_render_elements(text: str) -> frozenset[str]:
    """Return JSX opening-tag identifiers found in *text*."""
    return frozenset(match.group(1) for match in _JSX_TAG.finditer(text))


def extract_event_bindings(text: str) -> frozenset[str]:
    """Return ``onXxx=`` attribute names plus ``addEventListener`` usage."""
    bindings = set()
    for match in _EVENT_BINDING.finditer(text):
        bindings.add(match.group(1) or "addEventListener")
    return frozenset(bindings)


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _parameter_names(function_node: Node, source_bytes: bytes) -> List[str]:
    single = function_node.child_by_field_name("parameter")
    if single is not None:
        return [_node_text(single, source_bytes)]
    parameters = function_node.child_by_field_name("parameters")
    if parameters is None:
        return []
    return list(_iter_parameter_names(parameters.named_children, source_bytes))


def _iter_parameter_names(nodes: Iterable[Node], source_bytes: bytes) -> Iterator[str]:
    for node in nodes:
        if node.type == "comment":
            continue
        target = node.child_by_field_name("pattern")
        if target is None:
            target = node
        if target.type == "assignment_pattern":
            left = target.child_by_field_name("left")
            if left is not None:
                target = left
        text = _node_text(target, source_bytes)
        if text.startswith("..."):
            text = text[3:]
        if text and text != "this":
            yield text


__all__ = [
    "ReactSnapshotExtractor",
    "extract_event_bindings",
    "extract_hooks",
    "extract_render_elements",
]
