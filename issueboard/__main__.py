"""Run the API with ``python -m issueboard``."""

from __future__ import annotations

import uvicorn

from .core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("issueboard.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
