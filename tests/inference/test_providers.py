from __future__ import annotations

import pytest

from changeintel.config import InferenceConfig
from changeintel.errors import ConfigError
from changeintel.inference import (
    DefaultHeuristicProvider,
    NextProvider,
    ProviderRegistry,
    ViteProvider,
    default_registry,
)
from tests._fixtures.trees import feature, tree


def test_next_provider_detects_config_file() -> None:
    sample = tree(feature("next.config.js"), feature("app/page.tsx"))

    assert NextProvider().detect(".", sample) == 95
    assert NextProvider().detect(".", tree(feature("src/index.ts"))) == 0


def test_next_provider_roots_follow_app_and_pages_conventions() -> None:
    provider = NextProvider()

    assert provider.infer_source_roots(".", tree(feature("next.config.js"), feature("app/page.tsx"))) == ["."]
    nested = tree(feature("web/next.config.mjs"), feature("web/src/pages/index.tsx"))
    assert provider.infer_source_roots(".", nested) == ["web/src"]


def test_next_provider_without_app_or_pages_has_no_roots() -> None:
    sample = tree(feature("next.config.js"), feature("lib/util.ts"))

    assert NextProvider().infer_source_roots(".", sample) == []


def test_vite_provider_prefers_src_and_falls_back_to_config_dir() -> None:
    provider = ViteProvider()
    sample = tree(
        feature("vite.config.ts"),
        feature("src/main.ts"),
        feature("packages/ui/vite.config.js"),
        feature("packages/ui/index.ts"),
    )

    assert provider.detect(".", sample) == 90
    assert provider.infer_source_roots(".", sample) == ["src", "packages/ui"]


def test_default_provider_uses_directory_heuristics() -> None:
    files = [feature(f"client/C{index}.tsx", ui_signals={"html-tags"}) for index in range(10)]
    files.append(feature("server/main.go"))

    provider = DefaultHeuristicProvider()

    assert provider.detect(".", tree(*files)) == 10
    assert provider.infer_source_roots(".", tree(*files)) == ["client"]


def test_default_registry_orders_builtins_before_fallback() -> None:
    registry = default_registry()

    assert registry.names == ["nextjs", "vite", "default-heuristic"]
    assert registry.fallback is registry.providers[-1]


def test_default_registry_honours_configured_providers() -> None:
    registry = default_registry(InferenceConfig(providers=["vite"]))

    assert registry.names == ["vite", "default-heuristic"]


def test_default_registry_rejects_unknown_providers() -> None:
    with pytest.raises(ConfigError, match="gatsby"):
        default_registry(InferenceConfig(providers=["gatsby", "vite"]))


def test_registry_rejects_non_providers() -> None:
    with pytest.raises(TypeError):
        ProviderRegistry(providers=(object(),), fallback=DefaultHeuristicProvider())  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        ProviderRegistry(providers=(), fallback=None)  # type: ignore[arg-type]
