"""Calculator dispatch: optional native backend with a single Python fallback"""

import importlib
import logging
import time
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, Dict, Optional

from homeu_scores.config import Settings
from homeu_scores.domain import credit, forecast, market, resident, tenant_risk
from homeu_scores.domain.exceptions import CalculationFallbackError, DoubleFailureError, InvalidInputError
from homeu_scores.infrastructure.observability.metrics import record_calculation, record_fallback

ENGINE_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calculator:
    """
    A named calculator.

    `python` is the canonical implementation. `batch_size` returns the number
    of items a call will score, for calculators that accept `max_workers`.
    The native backend is expected to expose a function with the same name
    as the Python implementation, taking the same input dataclass.
    """

    name: str
    python: Callable[..., Any]
    batch_size: Optional[Callable[[Any], int]] = None

    @property
    def function_name(self) -> str:
        return self.python.__name__


def _tenant_count(data) -> int:
    return len(data.tenants)


CALCULATORS: Dict[str, Calculator] = {
    c.name: c
    for c in (
        Calculator("desirability", resident.calculate_desirability),
        Calculator("negotiation", resident.calculate_negotiation),
        Calculator("renter_score", resident.calculate_renter_score),
        Calculator("deal_score", market.calculate_deal_score),
        Calculator("leverage_score", market.calculate_leverage_score),
        Calculator("renewal_strategy", market.calculate_renewal_strategy),
        Calculator("tenant_risk", tenant_risk.calculate_tenant_risk),
        Calculator("tenant_risk_batch", tenant_risk.calculate_tenant_risks_batch, len),
        Calculator("creditworthiness", credit.calculate_creditworthiness),
        Calculator("creditworthiness_batch", credit.calculate_creditworthiness_batch, len),
        Calculator("collection_forecast", forecast.calculate_collection_forecast, _tenant_count),
        Calculator("portfolio_risk", forecast.calculate_portfolio_risk, _tenant_count),
        Calculator("portfolio_summary", forecast.calculate_portfolio_summary, _tenant_count),
    )
}


def load_native_backend(module_path: Optional[str]) -> Optional[ModuleType]:
    """
    Import the accelerated backend if one is configured and healthy.

    A backend that cannot be imported or fails its health check is skipped;
    every calculator then runs on the Python implementation.
    """
    if not module_path:
        return None

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        logger.warning(f"Native backend unavailable: {e}", extra={"backend": module_path})
        return None

    health_check = getattr(module, "health_check", None)
    if health_check is not None:
        try:
            healthy = bool(health_check())
        except Exception as e:
            logger.warning(f"Native backend health check raised: {e}", extra={"backend": module_path})
            healthy = False
        if not healthy:
            logger.warning("Native backend failed health check", extra={"backend": module_path})
            return None

    logger.info("Native backend loaded", extra={"backend": module_path})
    return module


class ScoringEngine:
    """Runs calculators by name, preferring the native backend when it has one"""

    def __init__(self, native: Optional[ModuleType] = None, max_workers: int = 1, parallel_threshold: int = 32):
        self.native = native
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringEngine":
        return cls(
            native=load_native_backend(settings.native_backend),
            max_workers=settings.batch_max_workers,
            parallel_threshold=settings.batch_parallel_threshold,
        )

    @property
    def backend(self) -> str:
        return "native" if self.native is not None else "python"

    @property
    def version(self) -> str:
        if self.native is not None:
            return str(getattr(self.native, "__version__", ENGINE_VERSION))
        return ENGINE_VERSION

    def health(self) -> Dict[str, Any]:
        """Backend status surfaced by /health"""
        healthy = True
        health_check = getattr(self.native, "health_check", None)
        if health_check is not None:
            try:
                healthy = bool(health_check())
            except Exception:
                healthy = False
        return {"backend": self.backend, "version": self.version, "healthy": healthy}

    def workers_for(self, size: int) -> int:
        """Batches at or below the threshold are scored inline"""
        return self.max_workers if size > self.parallel_threshold else 1

    def run(self, name: str, data: Any) -> Any:
        """
        Run one calculator.

        Flow:
        1. Native implementation, if the backend exposes one
        2. On native failure, the Python implementation, exactly once
        3. InvalidInputError always propagates; any other Python failure
           becomes DoubleFailureError
        """
        calculator = CALCULATORS[name]
        kwargs = {}
        if calculator.batch_size is not None:
            kwargs["max_workers"] = self.workers_for(calculator.batch_size(data))

        start_time = time.time()
        try:
            result = self._run_native(calculator, data)
            if result is None:
                result = calculator.python(data, **kwargs)
        except InvalidInputError:
            record_calculation(name, "invalid", time.time() - start_time)
            raise
        except Exception as e:
            record_calculation(name, "failed", time.time() - start_time)
            logger.error(f"Calculation failed: {e}", extra={"calculator": name})
            raise DoubleFailureError(f"{name} calculation failed") from e

        record_calculation(name, "success", time.time() - start_time)
        return result

    def _run_native(self, calculator: Calculator, data: Any) -> Any:
        native_fn = getattr(self.native, calculator.function_name, None)
        if native_fn is None:
            return None
        try:
            return native_fn(data)
        except Exception as e:
            fallback = CalculationFallbackError(f"{calculator.name}: {e}")
            record_fallback(calculator.name)
            logger.warning(f"Native calculation failed, using Python: {fallback}", extra={"calculator": calculator.name})
            return None
