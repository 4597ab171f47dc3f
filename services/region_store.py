from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from config import BOUNDS
from models import Region
from utils.data_loader import load_regions
from utils.numeric import clamp


def clamp_region(region: Region) -> Region:
    """Pull every bounded attribute of ``region`` back into its closed interval, in place."""
    for attr, (lower, upper) in BOUNDS.items():
        setattr(region, attr, clamp(getattr(region, attr), lower, upper))
    return region


class RegionStore:
    """
    In-memory collection of monitored regions.

    The set of regions is fixed at construction; regions are only ever
    mutated in place through ``update``.
    """

    def __init__(self, regions: List[Region]):
        self._regions: List[Region] = list(regions)
        self._by_id: Dict[str, Region] = {r.id: r for r in self._regions}
        if len(self._by_id) != len(self._regions):
            raise ValueError("Region ids must be unique")

    @classmethod
    def from_seed(cls, path: Union[str, Path]) -> "RegionStore":
        return cls(load_regions(path))

    def list(self) -> List[Region]:
        return self._regions

    def get(self, region_id: Optional[str]) -> Optional[Region]:
        if region_id is None:
            return None
        return self._by_id.get(region_id)

    def update(self, region_id: Optional[str], mutate: Callable[[Region], None]) -> Optional[Region]:
        """
        Apply ``mutate`` to the region with ``region_id`` and clamp the result.
        Returns the updated region, or None if no such region exists.
        """
        region = self.get(region_id)
        if region is None:
            return None
        mutate(region)
        return clamp_region(region)

    def __len__(self) -> int:
        return len(self._regions)
