from __future__ import annotations

import logging


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install a root handler for the ``user_registry.*`` loggers.

    Called once when the process-wide registry is first built. A no-op when the
    host has already configured logging.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
