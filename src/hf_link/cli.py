#!/usr/bin/env python3
"""
Command Line Interface for hf-link
"""

import sys
import asyncio
import logging
import argparse
from datetime import datetime
from typing import List, Optional

from .config import LinkConfig, load_config
from .core.band_plan import is_band
from .core.geodesy import classify_distance, initial_bearing_deg, distance_km
from .core.maidenhead import Coordinate, decode, encode, is_valid_locator
from .core.propagation import PropagationEstimator
from .core.session import SessionStateMachine
from .errors import HFLinkError
from .interfaces.data_models import MasterySnapshot
from .simulator import SimulatedGateway
from .version import log_version_info

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    root_logger = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    # Add handler if none exists
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(levelname)s:%(name)s:%(message)s'))
        root_logger.addHandler(handler)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def _hour(args) -> int:
    return args.hour if args.hour is not None else datetime.now().hour


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hf-link',
        description='HF grid/propagation tools and simulated on-air session',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    locate_parser = subparsers.add_parser('locate', help='Centre coordinate of a grid locator')
    locate_parser.add_argument('locator', help='Maidenhead locator, e.g. JO59jp')

    encode_parser = subparsers.add_parser('encode', help='Grid locator for a coordinate')
    encode_parser.add_argument('lat', type=float, help='Latitude (deg, +N)')
    encode_parser.add_argument('lon', type=float, help='Longitude (deg, +E)')
    encode_parser.add_argument('--precision', type=int, choices=(4, 6), default=4,
                               help='Locator length (default 4)')

    distance_parser = subparsers.add_parser('distance', help='Distance and bearing between locators')
    distance_parser.add_argument('source', help='From locator')
    distance_parser.add_argument('target', help='To locator')

    prop_parser = subparsers.add_parser('propagation', help='Propagation level for a band')
    prop_parser.add_argument('band', help='Band, e.g. 40m')
    prop_parser.add_argument('--hour', type=int, help='Local hour 0-23 (default: now)')
    prop_parser.add_argument('--seed', type=int, help='Random seed for reproducible output')

    rec_parser = subparsers.add_parser('recommend', help='Recommend a band')
    rec_parser.add_argument('--hour', type=int, help='Local hour 0-23 (default: now)')
    rec_parser.add_argument('--distance', type=float, help='Path length in km')
    rec_parser.add_argument('--seed', type=int, help='Random seed for reproducible output')

    forecast_parser = subparsers.add_parser('forecast', help='24-hour band level table')
    forecast_parser.add_argument('--seed', type=int, help='Random seed for reproducible output')

    sim_parser = subparsers.add_parser('simulate', help='Run a session against the simulated server')
    sim_parser.add_argument('--config', '-c', required=True, help='Configuration file path')
    sim_parser.add_argument('--band', help='Channel to switch to after connecting')
    sim_parser.add_argument('--message', default='CQ CQ CQ', help='Message to send')

    for sub in (locate_parser, encode_parser, distance_parser, prop_parser,
                rec_parser, forecast_parser, sim_parser):
        sub.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')

    return parser


async def run_simulation(config: LinkConfig, band: Optional[str], message: str) -> int:
    """Connect, switch, chat and disconnect against SimulatedGateway"""
    gateway = SimulatedGateway(
        seed=config.random_seed,
        operator_locator=config.locator if is_valid_locator(config.locator) else None,
    )
    machine = SessionStateMachine(
        gateway=gateway,
        mastery_provider=lambda: MasterySnapshot(1.0, 1.0, 1.0),
        config=config,
    )

    snapshot = await machine.connect()
    machine.drain_events()
    print(f"✓ Connected to {snapshot.server_address} on {machine.band} "
          f"(propagation {machine.propagation_level}/5)")

    channels = await machine.list_channels()
    print(f"  Channels: {', '.join(c.name for c in channels)}")

    if band:
        reading = await machine.switch_channel(band)
        machine.drain_events()
        print(f"✓ Switched to {reading.band} (propagation {reading.level}/5)")

    print(f"  Stations on {machine.band}:")
    for station in machine.stations:
        where = f"{station.locator}" if station.locator else "?"
        if station.distance_km is not None:
            where += f"  {station.distance_km:7.0f} km  {station.bearing_deg:5.1f}°"
        print(f"    {station.name:<10} {where}")

    await machine.send_message(message)
    machine.drain_events()
    for msg in machine.snapshot().messages:
        print(f"  [{msg.time:%H:%M:%S}] {msg.sender}: {msg.content}")

    await machine.disconnect()
    print("✓ Disconnected")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for hf-link command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(getattr(args, 'debug', False))
    logger.debug("DEBUG logging enabled")

    try:
        if args.command == 'locate':
            coord = decode(args.locator)
            print(f"{args.locator}: lat {coord.lat:.4f}  lon {coord.lon:.4f}  ({coord})")

        elif args.command == 'encode':
            locator = encode(Coordinate(lat=args.lat, lon=args.lon), precision=args.precision)
            print(locator)

        elif args.command == 'distance':
            a, b = decode(args.source), decode(args.target)
            km = distance_km(a, b)
            print(f"{args.source} -> {args.target}: {km:.1f} km, "
                  f"bearing {initial_bearing_deg(a, b):.1f}°, {classify_distance(km).value}")

        elif args.command == 'propagation':
            estimator = PropagationEstimator(seed=args.seed)
            hour = _hour(args)
            level = estimator.estimate_level(args.band, hour)
            note = "" if is_band(args.band) else " (not an HF band)"
            print(f"{args.band} @ {hour:02d}h: {level}/5{note}")

        elif args.command == 'recommend':
            estimator = PropagationEstimator(seed=args.seed)
            hour = _hour(args)
            if args.distance is not None:
                band = estimator.recommend_band_for_distance(args.distance, hour)
            else:
                band = estimator.recommend_band(hour)
            print(band)

        elif args.command == 'forecast':
            estimator = PropagationEstimator(seed=args.seed)
            print(estimator.forecast_table().to_string())

        elif args.command == 'simulate':
            config = load_config(args.config)
            log_version_info(logger)
            return asyncio.run(run_simulation(config, args.band, args.message))

    except FileNotFoundError as e:
        print(f"❌ Configuration file not found: {e.filename}")
        return 1
    except (HFLinkError, ValueError) as e:
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
