from __future__ import annotations

import logging

_NOISY = (
    "httpx",
    "aiosqlite",
    "sqlalchemy.engine",
    "uvicorn.access",
)


def configure_logging(level: str = "INFO") -> None:
    # Root defaults
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)
