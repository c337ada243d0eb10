"""Shared plumbing for score endpoints: timed dispatch and response envelopes"""

import time
from typing import Any, Dict, Type

from fastapi import Request
from pydantic import BaseModel

from homeu_scores.api.dependencies import get_request_id
from homeu_scores.api.v1.schemas import describe_fields
from homeu_scores.infrastructure.dispatch import ScoringEngine
from homeu_scores.infrastructure.observability.logging import log_calculation


def run_calculation(request: Request, engine: ScoringEngine, calculator: str, data: Any, **log_fields: Any) -> Any:
    """Dispatch one calculator and log its outcome against the request ID"""
    start_time = time.time()
    result = engine.run(calculator, data)
    duration_ms = (time.time() - start_time) * 1000
    log_calculation(get_request_id(request), calculator, "success", duration_ms, backend=engine.backend, **log_fields)
    return result


def success(data: Any, **extra: Any) -> Dict[str, Any]:
    return {"success": True, **extra, "data": data}


def descriptor(name: str, description: str, model: Type[BaseModel], **extra: Any) -> Dict[str, Any]:
    """Self-description returned by GET on each score endpoint"""
    return {"name": name, "method": "POST", "description": description, **describe_fields(model), **extra}
