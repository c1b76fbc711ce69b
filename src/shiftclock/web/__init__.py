"""shiftclock HTTP shell - FastAPI app exposing clock events and reports."""

import logging

import uvicorn

from ..models import ShiftclockConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def main(config: ShiftclockConfig | None = None):
    """Entry point for shiftclock-web command.

    Args:
        config: Resolved configuration. Defaults to ``SHIFTCLOCK_*`` env vars.
    """
    from .app import app, configure

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    if config is None:
        config = ShiftclockConfig.from_env()
    configure(config)

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
