"""Translate validation and calculation failures into {"error": ...} responses"""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from homeu_scores.api.dependencies import get_request_id
from homeu_scores.domain.exceptions import DoubleFailureError, InvalidInputError


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _field_path(loc: Sequence[Any]) -> str:
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) if parts else "request body"


def validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Message for the first pydantic error, naming the offending field"""
    if not errors:
        return "Invalid request body"
    first = errors[0]
    field = _field_path(first.get("loc", ()))
    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(exc.errors())
    logging.warning(f"Invalid request: {message}", extra={"request_id": get_request_id(request)})
    return error_response(400, message)


async def pydantic_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    message = validation_message(exc.errors())
    logging.warning(f"Invalid request: {message}", extra={"request_id": get_request_id(request)})
    return error_response(400, message)


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    message = f"Invalid value for {exc.field}: {exc.message}"
    logging.warning(f"Invalid input: {message}", extra={"request_id": get_request_id(request)})
    return error_response(400, message)


async def double_failure_handler(request: Request, exc: DoubleFailureError) -> JSONResponse:
    logging.error(f"Calculation failed: {exc}", extra={"request_id": get_request_id(request)})
    return error_response(500, "Failed to calculate score")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(DoubleFailureError, double_failure_handler)
