"""Run the catalog API with uvicorn."""

import uvicorn

from src.api import create_app
from src.config import get_config


def main() -> None:
    config = get_config()
    app = create_app(config)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
