"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Request

from homeu_scores.config import settings
from homeu_scores.infrastructure.dispatch import ScoringEngine


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache(maxsize=1)
def get_engine() -> ScoringEngine:
    """Process-wide scoring engine; the native backend is loaded once"""
    return ScoringEngine.from_settings(settings)
