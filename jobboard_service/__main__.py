"""Run the service with uvicorn: ``python -m jobboard_service``."""

from __future__ import annotations

import uvicorn

from jobboard_service.core.settings import get_app_settings


def main() -> None:
    settings = get_app_settings()
    uvicorn.run(
        "jobboard_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
