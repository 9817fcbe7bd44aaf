"""
Walker location tracker

Reads the device position from a JSON file kept up to date by the GPS
daemon ({"latitude": .., "longitude": ..} or {"error": <code>}) and publishes
it to the API while running. Ctrl+C stops tracking and marks the location
inactive.

Usage:
    python scripts/walker_tracker.py --api http://localhost:8000 --token <id_token> --position gps.json
"""
import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import datetime

# project root on the Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.domains.tracking.client import TrackingApiClient
from app.domains.tracking.publisher import (
    LocationPublisher,
    Position,
    PositionError,
    POSITION_UNAVAILABLE,
    TrackingStartError,
)

logger = logging.getLogger("walker_tracker")


class JsonFileProvider:
    def __init__(self, path: str, poll_seconds: float = 5.0):
        self.path = path
        self.poll_seconds = poll_seconds

    def _read(self) -> Position:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PositionError(POSITION_UNAVAILABLE, str(e)) from e

        if "error" in data:
            raise PositionError(int(data["error"]), data.get("message", ""))

        return Position(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            timestamp=datetime.utcnow(),
        )

    async def current_position(self, high_accuracy=True, timeout=10.0, maximum_age=0.0) -> Position:
        return await asyncio.wait_for(asyncio.to_thread(self._read), timeout)

    async def watch(self, high_accuracy=True, timeout=10.0, maximum_age=5.0):
        while True:
            try:
                yield await self.current_position(high_accuracy, timeout, maximum_age)
            except PositionError as e:
                logger.warning("[TRACKING] watch: %s", e)
            await asyncio.sleep(self.poll_seconds)


async def run(api: str, token: str, position_file: str, interval: float) -> int:
    async with TrackingApiClient(api, token) as client:

        async def persist(latitude: float, longitude: float) -> None:
            await client.publish(latitude, longitude)

        publisher = LocationPublisher(
            JsonFileProvider(position_file),
            persist=persist,
            deactivate=client.stop,
            interval=interval,
        )

        status = await client.status()
        if status.get("active"):
            logger.info("[TRACKING] Resuming an active tracking session")

        try:
            position = await publisher.start()
        except TrackingStartError as e:
            print(e.message)
            return 1

        print(f"Seguimiento de ubicación iniciado ({position.latitude}, {position.longitude})")
        try:
            while True:
                await asyncio.sleep(3600)
        except asyncio.CancelledError:
            pass
        finally:
            await publisher.stop()
            print("Seguimiento detenido")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Publish the walker's location to the API")
    parser.add_argument("--api", default="http://localhost:8000")
    parser.add_argument("--token", required=True, help="Firebase ID token of the walker")
    parser.add_argument("--position", required=True, help="JSON file with the current position")
    parser.add_argument("--interval", type=float, default=settings.TRACKING_INTERVAL_SECONDS)
    args = parser.parse_args()

    setup_logging()
    try:
        code = asyncio.run(run(args.api, args.token, args.position, args.interval))
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
