import logging
import random
from typing import Callable, List, Optional

from config import (
    BOUNDS,
    PLANT_ACTIVATION_PROBABILITY,
    PLANT_MAX_DECAY,
    PLANT_MAX_GAIN,
    PLANT_POLLUTION_TRIGGER,
    POLLUTION_THRESHOLD,
    SHORTAGE_THRESHOLD,
    VOLATILITY,
)
from models import Alert, AlertCondition, AlertLevel, Region, TelemetrySnapshot
from services.alert_registry import AlertRegistry
from services.region_store import RegionStore
from services.telemetry import build_snapshot
from utils.numeric import clamp, now_ms

logger = logging.getLogger(__name__)


def random_walk(value: float, volatility: float, lower: float, upper: float, rng: random.Random) -> float:
    change = rng.uniform(-1.0, 1.0) * value * volatility
    return round(clamp(value + change, lower, upper), 2)


def step_region(region: Region, rng: random.Random) -> Region:
    """Advance one region by a single tick, in place."""
    for attr, volatility in VOLATILITY.items():
        lower, upper = BOUNDS[attr]
        setattr(region, attr, random_walk(getattr(region, attr), volatility, lower, upper, rng))

    # The plant only gets a chance to ramp up while the site is badly polluted
    lower, upper = BOUNDS["purification_percent"]
    if region.pollution_level > PLANT_POLLUTION_TRIGGER and rng.random() < PLANT_ACTIVATION_PROBABILITY:
        region.purification_percent = clamp(
            region.purification_percent + rng.random() * PLANT_MAX_GAIN, lower, upper
        )
    else:
        region.purification_percent = clamp(
            region.purification_percent - rng.random() * PLANT_MAX_DECAY, lower, upper
        )
    return region


def check_thresholds(region: Region, registry: AlertRegistry, now: int) -> List[Alert]:
    raised = []
    if region.water_volume < SHORTAGE_THRESHOLD:
        alert = registry.raise_alert(
            region,
            AlertCondition.SHORTAGE,
            AlertLevel.CRITICAL,
            title=f"Critical shortage in {region.name}",
            message=f"Water {region.water_volume} ML, immediate response needed",
            now=now,
        )
        if alert is not None:
            raised.append(alert)
    if region.pollution_level > POLLUTION_THRESHOLD:
        alert = registry.raise_alert(
            region,
            AlertCondition.POLLUTION,
            AlertLevel.WARNING,
            title=f"High pollution at {region.name}",
            message=f"Pollution {region.pollution_level} PPM, activate purification",
            now=now,
        )
        if alert is not None:
            raised.append(alert)
    return raised


class SimulationEngine:
    """
    Drives the region random walk and derives alerts from it.

    Holds no I/O: ``tick`` returns the snapshot and the caller decides
    where it goes.
    """

    def __init__(
        self,
        store: RegionStore,
        registry: AlertRegistry,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.registry = registry
        self.rng = rng or random.Random()
        self.clock = clock
        self.ticks = 0

    def tick(self) -> TelemetrySnapshot:
        now = self.clock()
        for region in self.store.list():
            step_region(region, self.rng)
            check_thresholds(region, self.registry, now)
        self.registry.prune(now)
        self.ticks += 1
        return build_snapshot(self.store.list(), self.registry.list(), now)

    def snapshot(self) -> TelemetrySnapshot:
        return build_snapshot(self.store.list(), self.registry.list(), self.clock())
