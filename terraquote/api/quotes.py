"""Quote PDF endpoint: adapts HTTP requests to the create-quote-PDF operation.

This is the only place errors become responses:
- malformed JSON body, IncompleteInputError or InvalidIdentifierError -> 400
- TariffNotFoundError and any collaborator failure -> 500
"""
# ruff: noqa: B008

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from terraquote.config import settings
from terraquote.quotes.errors import IncompleteInputError, InvalidIdentifierError
from terraquote.schemas.quote import ErrorResponse
from terraquote.services import QuoteServices
from terraquote.use_cases.create_quote_pdf import create_prospect_quote_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])

ERROR_MESSAGE = "Error al generar la cotización del prospecto."
ENVIRONMENT_ERROR_MESSAGE = "Environment not configured correctly"


def get_services(request: Request) -> QuoteServices:
    """FastAPI dependency: the QuoteServices created by the app lifespan."""
    return request.app.state.services


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("/pdf")
async def create_quote_pdf(
    request: Request,
    services: QuoteServices = Depends(get_services),
) -> JSONResponse:
    """Generate the quote PDF for the prospect in the request body."""
    if not settings.environment_configured:
        logger.warning("Environment could not be determined from ENVIRONMENT=%s", settings.environment)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ENVIRONMENT_ERROR_MESSAGE)

    raw_body = await request.body()
    try:
        payload = json.loads(raw_body) if raw_body.strip() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.info("Rejected malformed request body: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_MESSAGE, "El cuerpo de la solicitud no es JSON válido.")

    try:
        result = await create_prospect_quote_pdf(payload, services, settings.branding)
    except IncompleteInputError as exc:
        logger.info("Incomplete quote request: %s (%s)", exc, ", ".join(exc.missing_fields))
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_MESSAGE, str(exc))
    except InvalidIdentifierError as exc:
        logger.info("Rejected quote request: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, ERROR_MESSAGE, str(exc))
    except Exception as exc:
        logger.exception("Quote PDF generation failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ERROR_MESSAGE, str(exc))

    return JSONResponse(status_code=status.HTTP_200_OK, content=result.model_dump())
