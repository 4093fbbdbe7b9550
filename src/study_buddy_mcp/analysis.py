"""One-shot study analysis against Gemini with boundary validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .client import GeminiClient
from .errors import AnalysisError, categorize_error
from .models.study import StudyAnalysis
from .request_builder import AnalysisRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisSuccess:
    result: StudyAnalysis


@dataclass(frozen=True)
class AnalysisFailure:
    error: AnalysisError


AnalysisOutcome = Union[AnalysisSuccess, AnalysisFailure]


async def analyze(request: AnalysisRequest) -> AnalysisOutcome:
    """Run *request* once and validate the response against its contract.

    No retries and no partial results: the response either validates in
    full or the outcome is an ``AnalysisFailure``. The failure always carries
    the generic user-facing message; the cause is logged and chained.
    """
    try:
        raw = await GeminiClient.generate(
            list(request.parts),
            response_schema=request.response_schema,
            system_instruction=request.system_instruction,
        )
        result = request.schema.model_validate_json(raw)
    except Exception as exc:
        category, hint = categorize_error(exc)
        logger.warning("Study analysis failed [%s]: %s (%s)", category.value, exc, hint)
        error = AnalysisError()
        error.__cause__ = exc
        return AnalysisFailure(error=error)

    logger.info(
        "Study analysis succeeded: %d key term(s), %d question(s)",
        len(result.key_terms),
        len(result.questions),
    )
    return AnalysisSuccess(result=result)
