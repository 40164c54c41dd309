import logging

from fastapi import APIRouter, HTTPException, status

from referent.fetch.base import FailureKind, FetchFailure, InvalidURLError
from referent.llm import client as llm_client
from referent.schemas import ParseRequest, ParseResponse, TranslateRequest, TranslateResponse
from referent.services import article as article_service

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_MESSAGES = {
    FailureKind.FORBIDDEN: "Access denied (403). The site may be blocking automated requests. Try another URL or check that the site is available.",
    FailureKind.NOT_FOUND: "Page not found (404)",
    FailureKind.RATE_LIMITED: "The site is rate limiting requests (429). Try again later.",
    FailureKind.HTTP_ERROR: "Error while retrieving the page",
    FailureKind.TIMEOUT: "The server did not respond in time (timeout)",
    FailureKind.UNREACHABLE: "Could not connect to the server. Check the URL and that the site is available.",
    FailureKind.EMPTY_BODY: "The page is empty",
}

FAILURE_STATUS = {
    FailureKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    FailureKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    FailureKind.UNREACHABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    FailureKind.EMPTY_BODY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def failure_response_status(failure: FetchFailure) -> int:
    if failure.kind is FailureKind.HTTP_ERROR:
        if failure.status_code is not None and 400 <= failure.status_code < 600:
            return failure.status_code
        return status.HTTP_502_BAD_GATEWAY
    return FAILURE_STATUS[failure.kind]


def failure_detail(failure: FetchFailure) -> dict:
    message = FAILURE_MESSAGES[failure.kind]
    if failure.kind is FailureKind.HTTP_ERROR and failure.status_code is not None:
        message = f"{message}: {failure.status_code}"
    return {
        "error": message,
        "kind": failure.kind.value,
        "statusCode": failure.status_code,
        "attempts": failure.attempts,
    }


@router.post("/parse", response_model=ParseResponse)
async def parse_article(request: ParseRequest):
    """
    Retrieve an article and extract its title, date and body.

    Fields that cannot be found come back as "not found" sentinels; only
    retrieval failures produce an error response.
    """
    try:
        result = await article_service.retrieve_article(request.url)
    except InvalidURLError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except article_service.ArticleFetchError as e:
        raise HTTPException(
            status_code=failure_response_status(e.failure),
            detail=failure_detail(e.failure),
        )
    except Exception as e:
        logger.exception("Parse error for %s", request.url)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Error while parsing the article",
        )

    return ParseResponse(title=result.title, date=result.published_at, content=result.body)


@router.post("/translate", response_model=TranslateResponse)
async def translate_article(request: TranslateRequest):
    """Translate extracted article text through the external language model."""
    if not request.content.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content is required")

    try:
        translation = await llm_client.translate_text(request.content)
    except llm_client.TranslationError as e:
        detail = {"error": e.message, "statusCode": e.status_code}
        if e.details:
            detail["details"] = e.details
        raise HTTPException(status_code=e.status_code, detail=detail)

    return TranslateResponse(translation=translation)


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Referent"}
