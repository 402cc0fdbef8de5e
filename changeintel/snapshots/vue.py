"""Vue single-file component snapshot extractor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional, Protocol

from .base import SnapshotExtractor
from ..errors import ParseError
from ..models import ComponentSnapshot, Framework

LIFECYCLE_HOOKS = ("created", "mounted", "updated", "unmounted", "setup", "beforeMount")

_TEMPLATE_TAG = re.compile(r"<(/?)template\b[^>]*>", re.IGNORECASE)
_SCRIPT_OPEN = re.compile(r"<script\b([^>]*)>", re.IGNORECASE)
_SCRIPT_CLOSE = re.compile(r"</script\s*>", re.IGNORECASE)

_PROPS_OBJECT = re.compile(r"props\s*:\s*{([^}]*)}")
_PROPS_KEY = re.compile(r"(\w+)\s*:")
_DEFINE_PROPS = re.compile(r"defineProps\s*(?:<[^>]*>)?\s*\(([^)]*)\)")
_STRING_LITERAL = re.compile(r"['\"](\w+)['\"]")
_TEMPLATE_EVENT = re.compile(r"@([a-zA-Z0-9_-]+)=|v-on:([a-zA-Z0-9_-]+)=")
_TEMPLATE_ELEMENT = re.compile(r"<([A-Za-z][A-Za-z0-9-]*)\b")
_LIFECYCLE_CALLS = {name: re.compile(rf"\b{name}\s*\(") for name in LIFECYCLE_HOOKS}


@dataclass
class SfcDescriptor:
    """Top-level blocks of a Vue single-file component."""

    template: Optional[str] = None
    script: Optional[str] = None
    script_setup: Optional[str] = None

    @property
    def script_content(self) -> str:
        return "\n".join(part for part in (self.script, self.script_setup) if part)


class SfcParser(Protocol):
    """Splits a single-file component into its blocks."""

    def parse(self, file_path: str, source: str) -> SfcDescriptor:
        ...


class RegexSfcParser:
    """Block splitter that understands nested ``<template>`` tags."""

    def parse(self, file_path: str, source: str) -> SfcDescriptor:
        descriptor = SfcDescriptor()
        descriptor.template = self._template(file_path, source)
        self._scripts(file_path, source, descriptor)
        return descriptor

    @staticmethod
    def _template(file_path: str, source: str) -> Optional[str]:
        depth = 0
        start = 0
        for match in _TEMPLATE_TAG.finditer(source):
            closing = match.group(1) == "/"
            if not closing:
                if depth == 0:
                    start = match.end()
                depth += 1
                continue
            if depth == 0:
                raise ParseError(file_path, "unexpected </template> without opening tag")
            depth -= 1
            if depth == 0:
                return source[start : match.start()]
        if depth:
            raise ParseError(file_path, "unterminated <template> block")
        return None

    @staticmethod
    def _scripts(file_path: str, source: str, descriptor: SfcDescriptor) -> None:
        position = 0
        while True:
            opening = _SCRIPT_OPEN.search(source, position)
            if opening is None:
                return
            closing = _SCRIPT_CLOSE.search(source, opening.end())
            if closing is None:
                raise ParseError(file_path, "unterminated <script> block")
            content = source[opening.end() : closing.start()]
            if re.search(r"\bsetup\b", opening.group(1)):
                descriptor.script_setup = content
            else:
                descriptor.script = content
            position = closing.end()


class VueSnapshotExtractor(SnapshotExtractor):
    """Digests one ``.vue`` file into a single component snapshot."""

    framework = Framework.VUE
    extensions = frozenset({".vue"})

    def __init__(self, sfc_parser: Optional[SfcParser] = None) -> None:
        self._parser = sfc_parser or RegexSfcParser()

    def extract(self, file_path: str, source: str) -> List[ComponentSnapshot]:
        descriptor = self._parser.parse(file_path, source)
        script = descriptor.script_content
        template = descriptor.template or ""
        return [
            ComponentSnapshot(
                component_name=PurePosixPath(file_path).stem,
                framework=Framework.VUE,
                file_path=file_path,
                props=extract_props(script),
                hooks_or_lifecycle=extract_lifecycle(script),
                event_bindings=extract_template_events(template),
                render_elements=extract_template_elements(template),
            )
        ]


def extract_props(script: str) -> frozenset[str]:
    props = set()
    match = _PROPS_OBJECT.search(script)
    if match:
        props.update(key.group(1) for key in _PROPS_KEY.finditer(match.group(1)))
    match = _DEFINE_PROPS.search(script)
    if match:
        props.update(literal.group(1) for literal in _STRING_LITERAL.finditer(match.group(1)))
    return frozenset(props)


def extract_lifecycle(script: str) -> frozenset[str]:
    return frozenset(name for name, pattern in _LIFECYCLE_CALLS.items() if pattern.search(script))


def extract_template_events(template: str) -> frozenset[str]:
    return frozenset(match.group(1) or match.group(2) for match in _TEMPLATE_EVENT.finditer(template))


def extract_template_elements(template: str) -> frozenset[str]:
    return frozenset(match.group(1) for match in _TEMPLATE_ELEMENT.finditer(template))


__all__ = [
    "LIFECYCLE_HOOKS",
    "RegexSfcParser",
    "SfcDescriptor",
    "SfcParser",
    "VueSnapshotExtractor",
    "extract_lifecycle",
    "extract_props",
    "extract_template_elements",
    "extract_template_events",
]
