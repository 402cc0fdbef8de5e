from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Throwaway on-disk repository that can be rescanned into a FileTree."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def vite_repo(repo_builder: RepoBuilder) -> RepoBuilder:
    """Small Vite + React project with a Go backend next to it."""
    repo_builder.write(
        {
            "vite.config.ts": "export default defineConfig({ plugins: [react()] })\n",
            "package.json": '{"name": "shop"}\n',
            "src/main.tsx": "createRoot(el).render(<App />)\n",
            "src/App.tsx": """
                export function App({ items }) {
                  const [open, setOpen] = useState(false);
                  return <div className="app"><Cart items={items} onClick={() => setOpen(!open)} /></div>;
                }
            """,
            "src/Cart.vue": """
                <template><ul><li v-for="item in items" @click="pick(item)">{{ item }}</li></ul></template>
                <script>
                export default { props: { items: Array }, mounted() {} }
                </script>
            """,
            "server/main.go": "package main\n\nfunc main() {}\n",
        }
    )
    return repo_builder
