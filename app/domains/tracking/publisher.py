"""
Walker-side location publisher.

While tracking is on, one task follows the device's position (kept in memory
only) and another persists a fresh high-accuracy fix every interval. Device
errors follow the W3C geolocation codes.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Optional, Protocol

from app.core.config import settings

logger = logging.getLogger(__name__)

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

POSITION_ERROR_MESSAGES = {
    PERMISSION_DENIED: "Permiso de ubicación denegado. Por favor, habilita el acceso a la ubicación.",
    POSITION_UNAVAILABLE: "No se pudo obtener la ubicación. Verifica que el GPS esté activado.",
}
GENERIC_START_ERROR = "Error al iniciar el seguimiento de ubicación"

# fix options for persisted readings
FIX_TIMEOUT_SECONDS = 10.0
WATCH_MAXIMUM_AGE_SECONDS = 5.0


@dataclass
class Position:
    latitude: float
    longitude: float
    timestamp: datetime = field(default_factory=datetime.utcnow)


class PositionError(Exception):
    def __init__(self, code: int, message: str = ""):
        super().__init__(message or f"geolocation error {code}")
        self.code = code


class TrackingStartError(Exception):
    """Start failed; message is ready to show to the walker."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


def start_error_message(exc: BaseException) -> str:
    if isinstance(exc, PositionError):
        return POSITION_ERROR_MESSAGES.get(exc.code, GENERIC_START_ERROR)
    return GENERIC_START_ERROR


class GeolocationProvider(Protocol):
    async def current_position(
        self,
        high_accuracy: bool = True,
        timeout: float = FIX_TIMEOUT_SECONDS,
        maximum_age: float = 0.0,
    ) -> Position:
        ...

    def watch(
        self,
        high_accuracy: bool = True,
        timeout: float = FIX_TIMEOUT_SECONDS,
        maximum_age: float = WATCH_MAXIMUM_AGE_SECONDS,
    ) -> AsyncIterator[Position]:
        ...


PersistFn = Callable[[float, float], Awaitable[None]]
DeactivateFn = Callable[[], Awaitable[None]]


class LocationPublisher:

    def __init__(
        self,
        provider: GeolocationProvider,
        persist: PersistFn,
        deactivate: DeactivateFn,
        interval: Optional[float] = None,
    ):
        self.provider = provider
        self._persist_fn = persist
        self._deactivate_fn = deactivate
        self.interval = interval if interval is not None else settings.TRACKING_INTERVAL_SECONDS

        self.current_position: Optional[Position] = None
        self.last_update: Optional[datetime] = None
        self._watch_task: Optional[asyncio.Task] = None
        self._interval_task: Optional[asyncio.Task] = None

    @property
    def tracking(self) -> bool:
        return self._interval_task is not None and not self._interval_task.done()

    async def persist(self, position: Position) -> bool:
        self.current_position = position
        try:
            await self._persist_fn(position.latitude, position.longitude)
        except Exception as e:
            logger.error("[TRACKING] Error updating location: %s", e)
            return False

        self.last_update = datetime.utcnow()
        return True

    async def start(self) -> Position:
        if self.tracking:
            return self.current_position

        try:
            position = await self.provider.current_position(
                high_accuracy=True, timeout=FIX_TIMEOUT_SECONDS, maximum_age=0.0
            )
        except Exception as e:
            logger.warning("[TRACKING] Start failed: %s", e)
            raise TrackingStartError(start_error_message(e), getattr(e, "code", None)) from e

        await self.persist(position)

        self._watch_task = asyncio.create_task(self._watch_loop())
        self._interval_task = asyncio.create_task(self._interval_loop())
        logger.info("[TRACKING] Started, persisting every %ss", self.interval)
        return position

    async def stop(self) -> None:
        for task in (self._interval_task, self._watch_task):
            if task is not None and not task.done():
                task.cancel()
        for task in (self._interval_task, self._watch_task):
            if task is not None:
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._interval_task = None
        self._watch_task = None

        try:
            await self._deactivate_fn()
        except Exception as e:
            logger.error("[TRACKING] Error stopping tracking: %s", e)

        self.current_position = None
        self.last_update = None
        logger.info("[TRACKING] Stopped")

    async def _watch_loop(self) -> None:
        try:
            async for position in self.provider.watch(
                high_accuracy=True,
                timeout=FIX_TIMEOUT_SECONDS,
                maximum_age=WATCH_MAXIMUM_AGE_SECONDS,
            ):
                self.current_position = position
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("[TRACKING] Geolocation error: %s", e)

    async def _interval_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                position = await self.provider.current_position(
                    high_accuracy=True, timeout=FIX_TIMEOUT_SECONDS, maximum_age=0.0
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("[TRACKING] Error getting position: %s", e)
                continue
            await self.persist(position)
