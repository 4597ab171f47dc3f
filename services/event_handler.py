import logging
from typing import Optional

from config import (
    COMMAND_CLEAN_FACTOR,
    COMMAND_DEFAULT_BOOST,
    REQUEST_DEFAULT_BOOST,
    REQUEST_DEFAULT_CLEAN,
)
from models import PurifyCommand, PurifyRequest, Region
from services.region_store import RegionStore

logger = logging.getLogger(__name__)


def _purify(store: RegionStore, region_id: Optional[str], boost: float, clean: float) -> Optional[Region]:
    def mutate(region: Region) -> None:
        region.purification_percent += boost
        region.pollution_level -= clean

    region = store.update(region_id, mutate)
    if region is None:
        logger.warning("Purify rejected: region %s not found", region_id)
    else:
        logger.info(
            "Purified region=%s boost=%.2f clean=%.2f purification=%.2f pollution=%.2f",
            region.id,
            boost,
            clean,
            region.purification_percent,
            region.pollution_level,
        )
    return region


def apply_purify_command(store: RegionStore, command: PurifyCommand) -> Optional[Region]:
    """
    Purify requested by a stream subscriber.
    - Missing or zero boost falls back to the default
    - Pollution drops by a fixed fraction of the boost
    - Returns None when the region is unknown
    """
    boost = command.boost or COMMAND_DEFAULT_BOOST
    return _purify(store, command.region_id, boost, boost * COMMAND_CLEAN_FACTOR)


def apply_purify_request(store: RegionStore, region_id: str, request: Optional[PurifyRequest] = None) -> Optional[Region]:
    """
    Purify requested through the REST control surface.
    Boost and clean amounts are independent; no broadcast follows.
    """
    request = request or PurifyRequest()
    boost = request.boost or REQUEST_DEFAULT_BOOST
    clean = request.clean or REQUEST_DEFAULT_CLEAN
    return _purify(store, region_id, boost, clean)
