from typing import List

from models import Alert, Region, TelemetrySnapshot
from utils.numeric import round_half_up


def build_snapshot(regions: List[Region], alerts: List[Alert], timestamp: int) -> TelemetrySnapshot:
    """
    Aggregate the current regions and alerts into an immutable snapshot.

    Regions are copied so later ticks do not show through an already-sent
    snapshot. Assumes a non-empty region list.
    """
    count = len(regions)
    return TelemetrySnapshot(
        timestamp=timestamp,
        regions=[r.model_copy() for r in regions],
        total_water=round_half_up(sum(r.water_volume for r in regions)),
        avg_pollution=round_half_up(sum(r.pollution_level for r in regions) / count),
        avg_purification=round_half_up(sum(r.purification_percent for r in regions) / count),
        alerts=[a.model_copy() for a in alerts],
    )
