"""AI analysis API routes."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from labmind.models import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from labmind.services import ConfigurationError
from labmind.services.analysis import get_orchestrator, get_tool_definitions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["analysis"])


def _error(status_code: int, error: str, details: Any = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(request: AnalyzeRequest):
    """Analyze a dataset with model-directed statistical tools."""
    try:
        logger.info(
            f"Processing analysis request: type={request.analysis_type.value}, "
            f"has_query={bool(request.user_query)}"
        )
        orchestrator = get_orchestrator()
        return await orchestrator.analyze(request)

    except ConfigurationError as e:
        logger.error(f"Analysis service not configured: {e}")
        return _error(500, e.message)

    except Exception as e:
        logger.error(f"AI analysis error: {str(e)}", exc_info=True)
        details = e.message if hasattr(e, "message") else str(e)
        return _error(500, "Failed to perform analysis", details)


@router.get("/tools")
async def list_tools() -> Dict[str, List[Dict[str, Any]]]:
    """List the tools the model can call during an analysis."""
    return {"tools": get_tool_definitions()}
