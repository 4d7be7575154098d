"""Run the API with the configured server settings: ``python -m piggybank``."""

import uvicorn

from piggybank.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "piggybank.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    main()
