#!/usr/bin/env python3
"""
Session Demo - Mastery-Gated On-Air Practice

Walks through a full session against the simulated voice server: the
mastery gate, auto band selection, station distances, a channel switch
with its propagation reading, a chat exchange and a dropped connection.

Usage:
    python examples/session_demo.py
    python examples/session_demo.py --locator IO91wm --seed 7
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from hf_link import (
    LinkConfig,
    MasteryNotMet,
    MasterySnapshot,
    SessionStateMachine,
    SimulatedGateway,
)


def show(snapshot):
    level = f"{snapshot.propagation_level}/5" if snapshot.propagation_level else "-"
    print(f"  [{snapshot.state.name:<12}] band={snapshot.band or '-':<5} propagation={level}")


async def demo(locator: str, seed: int) -> None:
    progress = {'mastery': MasterySnapshot(1.0, 1.0, 0.9)}
    gateway = SimulatedGateway(seed=seed, operator_locator=locator)
    machine = SessionStateMachine(
        gateway=gateway,
        mastery_provider=lambda: progress['mastery'],
        config=LinkConfig(callsign="LA1ABC", locator=locator,
                          server_address="murmur.example.org", random_seed=seed),
    )
    machine.subscribe(show)
    events = asyncio.create_task(machine.process_events())

    print("\n" + "="*60)
    print("Step 1: Mastery gate")
    print("="*60)
    try:
        await machine.connect()
    except MasteryNotMet as e:
        print(f"  ✗ {e}")

    progress['mastery'] = MasterySnapshot(1.0, 1.0, 1.0)
    await machine.connect()
    await asyncio.sleep(0)

    print("\n" + "="*60)
    print(f"Step 2: Stations heard from {locator}")
    print("="*60)
    for station in machine.stations:
        print(f"  {station.name:<10} {station.locator}  "
              f"{station.distance_km:7.0f} km  {station.bearing_deg:5.1f}°")

    print("\n" + "="*60)
    print("Step 3: Channel switch")
    print("="*60)
    reading = await machine.switch_channel("20m")
    print(f"  ✓ On {reading.band}, propagation {reading.level}/5")

    print("\n" + "="*60)
    print("Step 4: Chat")
    print("="*60)
    await machine.send_message("CQ CQ DE LA1ABC K")
    await asyncio.sleep(0)
    for msg in machine.snapshot().messages:
        print(f"  {msg.sender}: {msg.content}")

    print("\n" + "="*60)
    print("Step 5: Server drops the connection")
    print("="*60)
    gateway.drop_connection()
    await asyncio.sleep(0)

    events.cancel()
    try:
        await events
    except asyncio.CancelledError:
        pass


def main():
    parser = argparse.ArgumentParser(description='hf-link session demo')
    parser.add_argument('--locator', default='JO59jp', help='Operator grid locator')
    parser.add_argument('--seed', type=int, default=1, help='Random seed')
    args = parser.parse_args()

    try:
        asyncio.run(demo(args.locator, args.seed))
    except Exception as e:
        print(f"\n❌ Error: {e}")
        return 1

    print("\nDemo complete!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
