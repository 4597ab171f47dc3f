import json
import logging
from pathlib import Path
from typing import List, Union

from models import Region

logger = logging.getLogger(__name__)


def load_regions(path: Union[str, Path]) -> List[Region]:
    with open(path) as f:
        data = json.load(f)
    regions = [Region(**region) for region in data["regions"]]
    logger.info("Loaded %d regions from %s", len(regions), path)
    return regions
