"""Optional MLflow tracing for study commands.

Each ``study_*`` tool becomes a ``TOOL`` span and Gemini autologging nests
the analysis call beneath ``study_submit``. Without ``mlflow-tracing``
installed, or without ``MLFLOW_TRACKING_URI``, everything here is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import get_config

logger = logging.getLogger(__name__)

try:
    import mlflow
    import mlflow.gemini

    _HAS_MLFLOW = True
except ImportError:
    _HAS_MLFLOW = False


def is_enabled() -> bool:
    return _HAS_MLFLOW and get_config().tracing_enabled


def trace(func: Callable | None = None, *, name: str | None = None, span_type: str | None = None) -> Callable:
    """``@mlflow.trace`` when tracing is on; otherwise returns the tool untouched."""
    if not is_enabled():
        return func if func is not None else (lambda f: f)
    return mlflow.trace(func, name=name, span_type=span_type)


def setup() -> None:
    """Configure MLflow from the live config. A failure here only disables tracing."""
    if not is_enabled():
        return
    cfg = get_config()
    try:
        mlflow.set_tracking_uri(cfg.mlflow_tracking_uri)
        mlflow.set_experiment(cfg.mlflow_experiment_name)
        mlflow.gemini.autolog()
    except Exception:
        logger.warning("MLflow tracing setup failed — continuing without tracing", exc_info=True)
        return
    logger.info("Tracing study sessions to %s (%s)", cfg.mlflow_tracking_uri, cfg.mlflow_experiment_name)


def shutdown() -> None:
    """Flush spans still queued for async export."""
    if not is_enabled():
        return
    try:
        mlflow.flush_trace_async_logging()
    except Exception:
        logger.warning("MLflow trace flush failed", exc_info=True)
