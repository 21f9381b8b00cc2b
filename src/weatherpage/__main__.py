from __future__ import annotations

import logging

import uvicorn

from .settings import load_settings


def main() -> None:
    settings = load_settings()
    log_level = settings.env.weatherpage_log_level
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "weatherpage.main:app",
        host=settings.env.weatherpage_host,
        port=settings.env.weatherpage_port,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
