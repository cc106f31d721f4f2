from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import aiohttp
from pydantic import ValidationError

from slotwatch.config import Settings, get_settings
from slotwatch.models import QueryOptions
from slotwatch.services.errors import GeocodeNotFound
from slotwatch.services.http import ClicSanteClient
from slotwatch.watcher import Watcher

logger = logging.getLogger("slotwatch")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.app_name,
        description="Poll Clic Santé for open appointments near a postal code.",
    )
    parser.add_argument("--postal-code", "--postalCode", dest="postal_code", required=True)
    parser.add_argument("--tolerance", type=int, default=5, help="max days until the first open slot (default: 5)")
    parser.add_argument("--distance", type=float, default=10, help="search radius in km (default: 10)")
    parser.add_argument("--poll", type=float, default=1, help="minutes between checks (default: 1)")
    parser.add_argument(
        "--specific-date", "--specificDate", dest="specific_date", help="only match this date (YYYY-MM-DD)"
    )
    parser.add_argument("--output", choices=("plain", "box", "table"), default="box")
    parser.add_argument("--once", action="store_true", help="run a single pass and exit")
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.version}")
    return parser


def parse_options(parser: argparse.ArgumentParser, argv: Optional[List[str]] = None) -> tuple[QueryOptions, argparse.Namespace]:
    args = parser.parse_args(argv)
    try:
        options = QueryOptions(
            postal_code=args.postal_code,
            tolerance=args.tolerance,
            distance=args.distance,
            poll=args.poll,
            specific_date=args.specific_date,
            output=args.output,
        )
    except ValidationError as e:
        err = e.errors()[0]
        parser.error(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
    return options, args


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


async def run(options: QueryOptions, settings: Settings, once: bool = False) -> None:
    async with aiohttp.ClientSession() as session:
        watcher = Watcher(ClicSanteClient(session, settings), options, settings)
        if once:
            await watcher.run_pass()
        else:
            await watcher.run_forever()


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = build_parser(settings)
    options, args = parse_options(parser, argv)
    configure_logging(args.log_level)

    logger.info(
        "Watching %s (radius %skm, tolerance %d days, every %s minute(s))",
        options.postal_code,
        options.distance,
        options.tolerance,
        options.poll,
    )
    try:
        asyncio.run(run(options, settings, once=args.once))
    except GeocodeNotFound as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
