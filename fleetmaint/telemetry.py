"""Odometer telemetry ingestion.

A TelemetrySource reports which vehicles it knows and their latest odometer.
TelemetryAdapter fans the per-vehicle fetches out concurrently, applies the
readings to the store one at a time, and then runs trigger detection.
TelemetryPoller repeats that on a fixed interval.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .notifications import Notification, TriggerPipeline
from .store import RecordStore

logger = logging.getLogger(__name__)

METERS_TO_MILES = 0.000621371


def meters_to_miles(meters: float) -> int:
    """Convert a raw odometer reading in meters to whole miles."""
    return round(meters * METERS_TO_MILES)


@dataclass
class OdometerReading:
    """Latest odometer for a vehicle; None when no reading was available."""

    vehicle_id: str
    odometer: Optional[float]


@dataclass
class PollResult:
    """Outcome of one polling cycle."""

    readings: List[OdometerReading] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    changed: bool = False
    notification: Optional[Notification] = None
    superseded: bool = False


class TelemetrySource:
    """Vendor telemetry access. Readings are already in display units."""

    async def list_tracked_vehicles(self) -> List[str]:
        raise NotImplementedError

    async def fetch_latest_odometer(self, vehicle_id: str) -> Optional[float]:
        raise NotImplementedError


class StaticTelemetrySource(TelemetrySource):
    """Serves a fixed set of readings. Used for demos, the CLI and tests."""

    def __init__(self, readings: Optional[Dict[str, Optional[float]]] = None):
        self.readings = dict(readings or {})

    async def list_tracked_vehicles(self) -> List[str]:
        return list(self.readings)

    async def fetch_latest_odometer(self, vehicle_id: str) -> Optional[float]:
        return self.readings.get(vehicle_id)


class TelemetryAdapter:
    """Applies telemetry readings to the store and checks for new triggers."""

    def __init__(
        self,
        store: RecordStore,
        pipeline: TriggerPipeline,
        source: TelemetrySource,
        timeout: float = 10.0,
        on_refresh: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.pipeline = pipeline
        self.source = source
        self.timeout = timeout
        self.on_refresh = on_refresh
        self.connected = False
        self.last_sync: Optional[datetime] = None
        self._cycle = 0

    def apply_readings(self, readings: Iterable[OdometerReading]) -> bool:
        """
        Apply a batch of readings; missing readings are skipped.

        Each reading is evaluated and written in one store call. Calls
        on_refresh once if any reminder changed.
        """
        changed = False
        for reading in readings:
            if reading.odometer is None:
                continue
            if self.store.update_odometer(reading.vehicle_id, reading.odometer):
                changed = True
        if changed and self.on_refresh is not None:
            self.on_refresh()
        return changed

    def cancel(self) -> None:
        """Supersede the in-flight cycle; its results will be dropped."""
        self._cycle += 1

    async def _list_vehicles(self) -> Optional[List[str]]:
        try:
            return await asyncio.wait_for(
                self.source.list_tracked_vehicles(), self.timeout
            )
        except asyncio.TimeoutError:
            logger.error("Timed out listing vehicles from telemetry source")
        except Exception as e:
            logger.error("Could not list vehicles from telemetry source: %s", e)
        return None

    async def _fetch(self, vehicle_id: str) -> OdometerReading:
        try:
            odometer = await asyncio.wait_for(
                self.source.fetch_latest_odometer(vehicle_id), self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Odometer fetch for %s timed out", vehicle_id)
            odometer = None
        except Exception as e:
            logger.warning("Odometer fetch for %s failed: %s", vehicle_id, e)
            odometer = None
        return OdometerReading(vehicle_id, odometer)

    async def poll_once(self) -> PollResult:
        """
        Run one polling cycle.

        Vehicles referenced by reminders and known to the source are fetched
        concurrently. Failed or empty readings leave that vehicle unchanged.
        Trigger detection runs whether or not anything changed.
        """
        self._cycle += 1
        cycle = self._cycle
        result = PollResult()

        available = await self._list_vehicles()
        self.connected = available is not None
        known = set(available or [])
        tracked = [v for v in self.store.get_unique_vehicles() if v in known]

        readings = await asyncio.gather(*(self._fetch(v) for v in tracked))
        if cycle != self._cycle:
            logger.info("Dropping readings from superseded poll cycle %d", cycle)
            result.superseded = True
            return result

        result.readings = [r for r in readings if r.odometer is not None]
        result.failed = [r.vehicle_id for r in readings if r.odometer is None]
        result.changed = self.apply_readings(result.readings)
        result.notification = self.pipeline.check_triggered()
        if self.connected:
            self.last_sync = datetime.now()
        logger.debug(
            "Poll cycle %d: %d readings applied, %d failed",
            cycle,
            len(result.readings),
            len(result.failed),
        )
        return result


class TelemetryPoller:
    """Runs TelemetryAdapter.poll_once on a fixed interval in the event loop."""

    JOB_ID = "odometer-poll"

    def __init__(self, adapter: TelemetryAdapter, interval_seconds: float = 30):
        self.adapter = adapter
        self.interval_seconds = interval_seconds
        self.scheduler = AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Poll immediately, then every interval. Must be called inside a running loop."""
        self.scheduler.add_job(
            self.adapter.poll_once,
            IntervalTrigger(seconds=self.interval_seconds),
            id=self.JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            next_run_time=datetime.now(),
        )
        self.scheduler.start()
        logger.info("Polling telemetry every %s seconds", self.interval_seconds)

    def destroy(self) -> None:
        """Stop polling. A cycle still in flight will not write its readings."""
        self.adapter.cancel()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
