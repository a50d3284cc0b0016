"""
Main entry point for Audio Setup
"""

import os
import sys
import uvicorn
from fastapi import FastAPI
from loguru import logger

from .api import router
from .api.routes import initialize_manager
from .config import get_settings


def setup_logging():
    """Setup logging configuration"""
    settings = get_settings()
    log_dir = os.path.expanduser(settings.log_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "audio-setup.log")
    logger.remove()
    logger.add(log_file, rotation="10 MB", retention="7 days", level="DEBUG")
    logger.add(sys.stderr, level=settings.log_level)


def create_app() -> FastAPI:
    app = FastAPI(title="Audio Setup")
    app.include_router(router)
    return app


def main():
    """Main entry point"""
    setup_logging()
    settings = get_settings()
    logger.info("Starting Audio Setup")

    # Initialize the manager immediately
    initialize_manager()

    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
