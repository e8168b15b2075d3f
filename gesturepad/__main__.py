import asyncio
import logging

logger = logging.getLogger(__name__)


def run():
    from .main import main
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    run()
