"""Точка входа FastAPI."""
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import APIError, APIStatusError

from call_insights.api.routes import router
from call_insights.dependencies import get_analyzer
from call_insights.errors import ExtractionError
from call_insights.services.extraction import TranscriptAnalyzer

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
logging.getLogger("call_insights").setLevel(logging.INFO)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

app = FastAPI(title="Call Insights", description="Customer-service transcript analysis for CRM")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router, prefix="/api", tags=["analysis"])


@app.exception_handler(ExtractionError)
def handle_extraction_error(_request: Request, exc: ExtractionError):
    logger.error("[API] extraction failed kind=%s: %s", exc.kind, exc)
    return JSONResponse(
        status_code=exc.http_status,
        content={"success": False, "error": f"Failed to analyze conversation: {exc}", "kind": exc.kind},
    )


@app.exception_handler(APIError)
def handle_upstream_error(_request: Request, exc: APIError):
    upstream_status = exc.status_code if isinstance(exc, APIStatusError) else None
    logger.error("[API] upstream error %s status=%s: %s", type(exc).__name__, upstream_status, exc)
    return JSONResponse(
        status_code=502,
        content={
            "success": False,
            "error": f"Failed to analyze conversation: {exc}",
            "kind": "transport",
            "upstream_status": upstream_status,
        },
    )


@app.get("/health")
def health(analyzer: TranscriptAnalyzer = Depends(get_analyzer)):
    return {"status": "ok", "llm_configured": analyzer.config.is_ready}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000, log_config=None)
