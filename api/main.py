from fastapi import Depends, FastAPI, File, Header, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from tender_questions.config import config
from tender_questions.extractor import extract_detailed
from tender_questions.ingestion import InvalidInput, load_text
from tender_questions.rate_limit import RateLimiter, RateLimitExceeded
from tender_questions.schemas import ExtractRequest, ExtractResponse

logger = logging.getLogger("tender_questions.api")

app = FastAPI(title="Tender Question Extraction")
app.add_middleware(CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_methods=["*"], allow_headers=["*"])

_rate_limiter = RateLimiter.from_config(config)


def get_rate_limiter() -> RateLimiter:
    """Swap via app.dependency_overrides for a shared store or in tests."""
    return _rate_limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limited(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"error": "rate_limited", "message": str(exc), "retry_after": round(exc.retry_after)},
        headers={"Retry-After": str(max(1, round(exc.retry_after)))},
    )


@app.exception_handler(InvalidInput)
async def invalid_input(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"error": "invalid_input", "message": str(exc)})


@app.exception_handler(Exception)
async def processing_failed(request: Request, exc: Exception):
    logger.exception("Extraction failed: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "processing_failed",
            "message": "Question extraction failed. Please enter the questions manually "
                       "from the original document.",
        },
    )


def _extract(text, user_id: str, limiter: RateLimiter, details: bool) -> ExtractResponse:
    limiter.check(user_id)
    result = extract_detailed(load_text(text))
    logger.info("user=%s questions=%d", user_id, result.questions_found)
    return ExtractResponse(
        questions=result.question_texts(),
        questions_found=result.questions_found,
        details=result.questions if details else None,
    )


@app.post("/extract", response_model=ExtractResponse)
def extract(
    body: ExtractRequest,
    details: bool = False,
    x_user_id: str = Header(...),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    return _extract(body.text, x_user_id, limiter, details)


@app.post("/extract/file", response_model=ExtractResponse)
def extract_file(
    file: UploadFile = File(...),
    details: bool = False,
    x_user_id: str = Header(...),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    content = file.file.read()
    return _extract(content, x_user_id, limiter, details)


@app.get("/health")
def health():
    return {"status": "ok"}
