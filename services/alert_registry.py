import logging
from typing import List, Optional

from config import ALERT_RETENTION_MS
from models import Alert, AlertCondition, AlertLevel, Region

logger = logging.getLogger(__name__)


def alert_id(region_id: str, condition: AlertCondition) -> str:
    return f"{region_id}-{condition.value}"


class AlertRegistry:
    """
    Active alerts, at most one per (region, condition) pair.

    Alerts are kept newest first and expire once older than the retention
    window, whether or not the triggering condition has cleared.
    """

    def __init__(self, retention_ms: int = ALERT_RETENTION_MS):
        self.retention_ms = retention_ms
        self._alerts: List[Alert] = []

    def get(self, key: str) -> Optional[Alert]:
        return next((a for a in self._alerts if a.id == key), None)

    def raise_alert(
        self,
        region: Region,
        condition: AlertCondition,
        level: AlertLevel,
        title: str,
        message: str,
        now: int,
    ) -> Optional[Alert]:
        """Insert a new alert unless an unexpired one exists for this region and condition."""
        key = alert_id(region.id, condition)
        existing = self.get(key)
        if existing is not None:
            if now - existing.created_at <= self.retention_ms:
                return None
            self._alerts.remove(existing)

        alert = Alert(
            id=key,
            region_id=region.id,
            condition=condition,
            level=level,
            title=title,
            message=message,
            created_at=now,
        )
        self._alerts.insert(0, alert)
        logger.info("Alert raised id=%s level=%s", key, level.value)
        return alert

    def prune(self, now: int) -> int:
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if now - a.created_at <= self.retention_ms]
        dropped = before - len(self._alerts)
        if dropped:
            logger.info("Pruned %d expired alerts", dropped)
        return dropped

    def list(self) -> List[Alert]:
        return list(self._alerts)

    def clear(self) -> None:
        self._alerts.clear()

    def __len__(self) -> int:
        return len(self._alerts)
