"""
Main entry point for the lane runner.

Runs the simulation headless with the autopilot and logs the outcome.
"""

import asyncio
import logging
import sys

from lanerunner.config.settings import get_settings
from lanerunner.game import GameController
from lanerunner.runner import Autopilot, HeadlessRunner


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_headless() -> dict:
    settings = get_settings()
    controller = GameController(settings=settings)
    autopilot = Autopilot(controller) if settings.autopilot else None
    runner = HeadlessRunner(controller, frame_ms=settings.frame_ms, autopilot=autopilot)
    try:
        return await runner.run(max_frames=settings.max_frames, stop_on_game_over=True)
    finally:
        controller.close()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info(f"Lane runner starting (seed={settings.seed})")

    try:
        result = asyncio.run(run_headless())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info(
        f"Final score={result['score']} coins={result['coins']} "
        f"distance={result['distance']}m"
    )


if __name__ == "__main__":
    main()
