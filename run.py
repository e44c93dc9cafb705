#  Place Search - Entry Point
#
#  Launches the FastAPI server via uvicorn.
#
#  Depends on: placesearch/app.py, placesearch/config.py, placesearch/logging_config.py
#  Used by:    (run directly)

import uvicorn

from placesearch.config import cfg
from placesearch.logging_config import setup_logging


def main():
    setup_logging(
        level=cfg("server.log_level", "INFO"),
        fmt=cfg("server.log_format", "json"),
    )

    uvicorn.run(
        "placesearch.app:app",
        host=cfg("server.host", "0.0.0.0"),
        port=cfg("server.port", 8787),
        reload=cfg("server.reload", False),
    )


if __name__ == "__main__":
    main()
