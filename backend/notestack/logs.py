"""
notestack: Logging Configuration
==================================

What:  Root logger setup shared by both services.
When:  First thing in each app's lifespan, before any other startup step.

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger to write to stdout at the given level.

    force=True replaces handlers installed earlier (uvicorn's, pytest's).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
