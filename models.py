from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire; both accepted on input
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Region(WireModel):
    id: str
    name: str
    lat: float
    lon: float
    water_volume: float = Field(ge=10, le=4000)
    pollution_level: float = Field(ge=5, le=200)
    ph: float = Field(ge=5.2, le=9.2, alias="pH")
    temperature: float = Field(ge=-5, le=45)
    purification_percent: float = Field(ge=0, le=100)


class AlertLevel(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class AlertCondition(str, Enum):
    SHORTAGE = "shortage"
    POLLUTION = "pollution"


class Alert(WireModel):
    id: str  # "<region_id>-<condition>"
    region_id: str
    condition: AlertCondition
    level: AlertLevel
    title: str
    message: str
    created_at: int  # epoch milliseconds


class TelemetrySnapshot(WireModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int  # epoch milliseconds
    regions: List[Region]
    total_water: int
    avg_pollution: int
    avg_purification: int
    alerts: List[Alert]


class PurifyRequest(WireModel):
    boost: Optional[float] = None
    clean: Optional[float] = None


class PurifyCommand(WireModel):
    region_id: Optional[str] = None
    boost: Optional[float] = None

    @field_validator("region_id", mode="before")
    @classmethod
    def _scalar_id_to_str(cls, value: Any) -> Any:
        # numeric ids are looked up like any other unknown string
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class ActionResult(WireModel):
    ok: bool
    region: Optional[Region] = None
    error: Optional[str] = None


class ClientMessage(BaseModel):
    """Inbound WebSocket frame: ``{"event": ..., "data": ...}``."""

    event: str
    data: Any = None
