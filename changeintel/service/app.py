"""FastAPI application exposing changeintel transforms over JSON."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..classifiers import (
    GranularAnalyzer,
    classifier_for,
    rank_file_importance,
    select_important_files,
    summarize_classifications,
)
from ..config import ChangeIntelConfig, load_config
from ..errors import ConfigError, InputValidationError
from ..inference import ProjectInferenceEngine, default_registry
from ..logging import configure_logging, get_logger
from ..repo_scanner import RepoScanner
from ..snapshots import ExtractorRegistry, diff_snapshots
from ..snapshots import default_registry as default_extractors
from ..validation import (
    parse_change_record,
    parse_dependency_graph,
    parse_file_tree,
    parse_snapshots,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SourceFile(_CamelModel):
    file_path: str = Field(alias="filePath")
    source: str


class ExtractRequest(_CamelModel):
    files: List[SourceFile]


class DiffRequest(_CamelModel):
    before: List[Dict[str, Any]] = Field(default_factory=list)
    after: List[Dict[str, Any]] = Field(default_factory=list)


class ClassifyRequest(_CamelModel):
    rule_set: str = Field(default="frontend", alias="ruleSet")
    records: List[Dict[str, Any]]


class GranularRequest(_CamelModel):
    records: List[Dict[str, Any]]


class ImportanceRequest(_CamelModel):
    records: List[Dict[str, Any]]
    dependency_graph: Optional[Dict[str, Any]] = Field(default=None, alias="dependencyGraph")
    snapshots: List[Dict[str, Any]] = Field(default_factory=list)
    min_score: float = Field(default=0.0, alias="minScore")
    max_files: Optional[int] = Field(default=None, alias="maxFiles")


class InferenceRequest(_CamelModel):
    root_dir: str = Field(default=".", alias="rootDir")
    file_tree: Optional[Dict[str, Any]] = Field(default=None, alias="fileTree")
    path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


@dataclass
class ServiceContext:
    """Components shared by the request handlers."""

    config: ChangeIntelConfig
    extractors: ExtractorRegistry = field(default_factory=default_extractors)
    granular: GranularAnalyzer = field(default_factory=GranularAnalyzer)
    engine: Optional[ProjectInferenceEngine] = None
    scanner: Optional[RepoScanner] = None

    def __post_init__(self) -> None:
        if self.engine is None:
            inference = self.config.inference
            self.engine = ProjectInferenceEngine(
                default_registry(inference), get_logger("inference"), inference
            )
        if self.scanner is None:
            self.scanner = RepoScanner(self.config.scan)


def _default_context() -> ServiceContext:
    return ServiceContext(config=ChangeIntelConfig(root=Path.cwd()))


def create_app(
    context_factory: Callable[[], ServiceContext] = _default_context,
) -> FastAPI:
    """Create the FastAPI application exposing changeintel operations."""

    app = FastAPI(title="ChangeIntel Service", version="1.0.0")
    logger = get_logger("service")

    async def get_context() -> ServiceContext:
        return context_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/snapshots/extract")
    async def extract_snapshots(
        payload: ExtractRequest,
        context: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        snapshots = context.extractors.extract_batch(
            (item.file_path, item.source) for item in payload.files
        )
        return {"snapshots": [snapshot.to_dict() for snapshot in snapshots]}

    @app.post("/snapshots/diff")
    async def diff(payload: DiffRequest) -> Dict[str, Any]:
        events = diff_snapshots(parse_snapshots(payload.before), parse_snapshots(payload.after))
        return {"events": [event.to_dict() for event in events]}

    @app.post("/classify")
    async def classify(
        payload: ClassifyRequest,
        context: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        classifier = classifier_for(payload.rule_set)
        records = [parse_change_record(item) for item in payload.records]
        results = classifier.classify_many(records)
        summary = summarize_classifications(results, context.config.classification)
        return {
            "results": [result.to_dict() for result in results],
            "summary": summary.to_dict(),
        }

    @app.post("/classify/granular")
    async def classify_granular(
        payload: GranularRequest,
        context: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        changes = []
        for item in payload.records:
            changes.extend(context.granular.analyze(parse_change_record(item)))
        return {"changes": [change.to_dict() for change in changes]}

    @app.post("/classify/importance")
    async def classify_importance(payload: ImportanceRequest) -> Dict[str, Any]:
        records = [parse_change_record(item) for item in payload.records]
        classifications = classifier_for("frontend").classify_many(records)
        ranked = rank_file_importance(
            records,
            parse_dependency_graph(payload.dependency_graph),
            parse_snapshots(payload.snapshots),
            classifications,
        )
        selected = select_important_files(ranked, payload.min_score, payload.max_files)
        return {"files": [item.to_dict() for item in selected]}

    @app.post("/inference")
    async def infer(
        payload: InferenceRequest,
        context: ServiceContext = Depends(get_context),
    ) -> Dict[str, Any]:
        if payload.file_tree is not None:
            tree = parse_file_tree(payload.file_tree)
            root_dir = payload.root_dir
        elif payload.path:
            loop = asyncio.get_running_loop()
            tree = await loop.run_in_executor(None, context.scanner.scan, payload.path)
            root_dir = payload.path
        else:
            raise InputValidationError("either fileTree or path must be provided")
        result = await context.engine.infer_async(root_dir, tree)
        logger.info("Inferred %s roots %s", result.project_type, result.source_roots)
        return result.to_dict()

    @app.exception_handler(InputValidationError)
    async def input_validation_handler(_: Any, exc: InputValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0",
    port: int = 8000,
    *,
    root: str = ".",
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> None:  # pragma: no cover - integration path
    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    config = load_config(Path(root))
    configure_logging(
        verbose=verbose,
        log_file=log_file or config.logging.file,
        level=config.logging.level,
        components=config.logging.components,
    )
    context = ServiceContext(config=config)
    app = create_app(lambda: context)
    uvicorn.run(app, host=host, port=port)


__all__ = ["ServiceContext", "create_app", "run_service"]
