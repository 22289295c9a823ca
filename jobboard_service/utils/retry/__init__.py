from __future__ import annotations

from jobboard_service.utils.retry.decorator import retry
from jobboard_service.utils.retry.exceptions import RetryError, RetryStatistics
from jobboard_service.utils.retry.strategies import RetryStrategy

__all__ = ["retry", "RetryError", "RetryStatistics", "RetryStrategy"]
