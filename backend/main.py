"""Restaurant website audit API – FastAPI app and endpoints."""

import logging

from anthropic import Anthropic
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_service import build_insight_client, run_selftest
from auditor import run_audit
from config import CORS_ORIGINS, INSIGHT_MODEL_CANDIDATES, LOG_LEVEL, PORT, get_api_key
from errors import FetchError, InvalidURLError
from schemas import AuditRequest, AuditResponse, SelfTestResponse

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Restaurant Website Audit API",
    description="Scores a restaurant homepage and suggests fixes",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup() -> None:
    api_key = get_api_key()
    if api_key:
        logger.info("ANTHROPIC_API_KEY found (%s...)", api_key[:10])
        logger.info("AI insights enabled, models: %s", ", ".join(INSIGHT_MODEL_CANDIDATES))
    else:
        logger.warning("No ANTHROPIC_API_KEY found - AI insights disabled")


def get_insight_client() -> Anthropic | None:
    """Per-request AI client; None disables insights."""
    return build_insight_client()


@app.exception_handler(InvalidURLError)
async def invalid_url_handler(request: Request, exc: InvalidURLError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Request body must be JSON with a url field"})


@app.exception_handler(FetchError)
async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": f"Could not scan site: {exc}"})


@app.post("/audit", response_model=AuditResponse)
def audit(
    body: AuditRequest,
    client: Anthropic | None = Depends(get_insight_client),
) -> AuditResponse:
    """
    Pipeline: fetch homepage -> extract signals -> grade -> AI insights -> report.
    """
    report = run_audit(body.url, client)
    return AuditResponse.from_report(report)


@app.get("/insight-selftest", response_model=SelfTestResponse, response_model_exclude_none=True)
def insight_selftest(client: Anthropic | None = Depends(get_insight_client)) -> SelfTestResponse:
    """Check the API key and model availability without running an audit."""
    return SelfTestResponse.model_validate(run_selftest(client))


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
