"""
Main entry point for the guild wheel.

Runs the pygame simulator against the guild API when one is configured,
otherwise against a local demo roster.
"""

import asyncio
import logging
import sys

from guildwheel.authority.base import WinnerAuthority
from guildwheel.config.settings import Settings, get_settings

# (name, rank, days in guild)
DEMO_ROSTER = [
    ("Aldric", "Officer", 412), ("Brienne", "Veteran", 230),
    ("Cassius", "Member", 95), ("Delphine", "Veteran", 301),
    ("Eamon", "Member", 41), ("Freya", "Officer", 388),
    ("Gareth", "Recruit", 12), ("Hild", "Member", 150),
]


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_authority(settings: Settings) -> WinnerAuthority:
    """Pick the winner authority for this run."""
    from guildwheel.authority.http import GuildApiAuthority
    from guildwheel.authority.memory import InMemoryAuthority
    from guildwheel.wheel.models import Candidate

    if settings.uses_remote_authority:
        return GuildApiAuthority(
            api_base=settings.authority.api_base,
            api_key=settings.authority.api_key,
            timeout=settings.authority.timeout,
        )

    roster = [
        Candidate(
            id=f"demo-{i}",
            label=name,
            metadata={"username": name, "rank": rank, "days_in_guild": days},
        )
        for i, (name, rank, days) in enumerate(DEMO_ROSTER)
    ]
    return InMemoryAuthority(roster, latency=0.4)


async def run_simulator(settings: Settings) -> None:
    """Run the simulator window."""
    from guildwheel.simulator.window import SimulatorWindow

    authority = build_authority(settings)
    window = SimulatorWindow(authority=authority, settings=settings)
    try:
        await window.run()
    finally:
        close = getattr(authority, "close", None)
        if close is not None:
            await close()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    if settings.uses_remote_authority:
        logger.info(f"Using guild API at {settings.authority.api_base}")
    else:
        logger.info("No guild API configured, using demo roster")

    try:
        asyncio.run(run_simulator(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
