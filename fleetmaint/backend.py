"""Durability backends for the record store.

A backend stores one YAML-compatible value per slot (see loader.SLOTS).
Failures are raised as PersistenceUnavailable so the store can degrade to
in-memory operation.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


class PersistenceUnavailable(Exception):
    """The durability backend could not save or load a slot."""


class Backend:
    """Key-value slot storage."""

    def save(self, slot: str, data: Any) -> None:
        raise NotImplementedError

    def load(self, slot: str) -> Optional[Any]:
        """Return the stored value, or None if the slot was never written."""
        raise NotImplementedError


class MemoryBackend(Backend):
    """Keeps serialized slots in a dict. Useful for tests and throwaway stores."""

    def __init__(self, slots: Optional[Dict[str, Any]] = None):
        self.slots: Dict[str, str] = {}
        for slot, data in (slots or {}).items():
            self.save(slot, data)

    def save(self, slot: str, data: Any) -> None:
        self.slots[slot] = yaml.safe_dump(data, sort_keys=False)

    def load(self, slot: str) -> Optional[Any]:
        text = self.slots.get(slot)
        if text is None:
            return None
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise PersistenceUnavailable(f"Slot {slot!r} is not valid YAML: {e}") from e


class YamlFileBackend(Backend):
    """One YAML file per slot inside a data directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, slot: str) -> Path:
        return self.directory / f"{slot}.yaml"

    def save(self, slot: str, data: Any) -> None:
        path = self.path_for(slot)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as fp:
                yaml.dump(
                    data,
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceUnavailable(f"Could not write {path}: {e}") from e

    def load(self, slot: str) -> Optional[Any]:
        path = self.path_for(slot)
        if not path.exists():
            return None
        try:
            with open(path, "r") as fp:
                return yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceUnavailable(f"Could not read {path}: {e}") from e
