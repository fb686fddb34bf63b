"""
Server runner.
Usage: python -m coolify_worker.run_server
"""

import logging

from .config import WorkerConfig
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def main():
    import uvicorn
    from .api import create_app

    config = WorkerConfig.from_env()
    configure_logging(config.log_level, config.log_format)

    app = create_app(config)
    logger.info(f"HTTP server listening on port {config.port}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=config.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
