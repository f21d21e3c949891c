"""Vehicle catalog used to enrich records with display details."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import yaml

from .loader import load_seed


@dataclass(frozen=True)
class VehicleInfo:
    """Display details for one vehicle."""

    id: str
    make: str = ""


class VehicleCatalog:
    """Lookup of known vehicles by id."""

    def __init__(self, vehicles: Iterable[VehicleInfo] = ()):
        self._vehicles: Dict[str, VehicleInfo] = {v.id: v for v in vehicles}

    def lookup(self, vehicle_id: str) -> Optional[VehicleInfo]:
        return self._vehicles.get(vehicle_id)

    def make_of(self, vehicle_id: Optional[str]) -> str:
        """Make/model for a vehicle, or "" when unknown."""
        info = self.lookup(vehicle_id) if vehicle_id else None
        return info.make if info else ""

    def add(self, vehicle: VehicleInfo) -> None:
        """Register or replace a vehicle (e.g. one discovered by telemetry)."""
        self._vehicles[vehicle.id] = vehicle

    @property
    def vehicle_ids(self) -> List[str]:
        return list(self._vehicles)

    @classmethod
    def from_dicts(cls, items: Iterable[dict]) -> "VehicleCatalog":
        return cls(VehicleInfo(d["id"], d.get("make") or "") for d in items)

    @classmethod
    def from_file(cls, filename: Union[str, Path]) -> "VehicleCatalog":
        """Load a YAML list of {id, make} entries."""
        with open(filename, "r") as fp:
            return cls.from_dicts(yaml.load(fp, Loader=yaml.SafeLoader) or [])

    @classmethod
    def known_vehicles(cls) -> "VehicleCatalog":
        """The built-in fleet listed in the seed data."""
        return cls.from_dicts(load_seed().get("knownVehicles") or [])
