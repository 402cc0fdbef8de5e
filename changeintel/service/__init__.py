"""HTTP service mode for changeintel."""

from .app import ServiceContext, create_app, run_service

__all__ = ["ServiceContext", "create_app", "run_service"]
