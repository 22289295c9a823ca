"""Base service class for business logic."""

from __future__ import annotations

import logging

from jobboard_service.infra.logging import get_lazy_logger


class BaseService:
    """Base class for domain services.

    Loggers:
        - self.logger: standard logger for INFO/WARNING/ERROR
        - self._lazy: lazy logger for DEBUG (callables evaluated only when enabled)
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)
