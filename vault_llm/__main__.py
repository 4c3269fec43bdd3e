"""Main entry point for running the API server."""

import uvicorn

from vault_llm.config.logging_config import configure_logging
from vault_llm.config.settings import get_settings


def main():
    """Start the FastAPI server."""
    settings = get_settings()
    configure_logging(debug_mode=settings.debug, log_level=settings.log_level)

    uvicorn.run(
        "vault_llm.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
