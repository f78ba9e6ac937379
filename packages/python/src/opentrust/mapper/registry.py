"""
MapperRegistry — a keyed collection of mappers.

The registry is an ordinary object passed to the code that needs it;
there is no process-wide instance.  All operations take an internal
lock, so one registry can be shared between threads.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from opentrust.errors import ValidationError
from opentrust.judgment import utc_timestamp
from opentrust.mapper.types import Mapper, MapperType
from opentrust.mapper.validator import MapperValidator

logger = logging.getLogger(__name__)


def _describe(mapper: Mapper) -> dict[str, Any]:
    p = mapper.parameters
    return {
        "id": p.id,
        "type": mapper.mapper_type.value,
        "version": p.version,
        "description": p.description,
        "metadata": p.metadata,
    }


class MapperRegistry:
    """Thread-safe storage and lookup of mappers by id."""

    def __init__(self, mappers: Iterable[Mapper] = ()) -> None:
        self._mappers: dict[str, Mapper] = {}
        self._lock = threading.RLock()
        for mapper in mappers:
            self.register(mapper)

    # ── Registration ───────────────────────────────────────────────

    def register(self, mapper: Mapper) -> None:
        """Add *mapper*; its id must not be registered yet."""
        with self._lock:
            if mapper.id in self._mappers:
                raise ValidationError(f"Mapper with ID '{mapper.id}' is already registered")
            mapper.validate()
            self._mappers[mapper.id] = mapper
        logger.debug("Registered mapper %s", mapper.id)

    def update(self, mapper: Mapper) -> None:
        """Replace an already-registered mapper."""
        with self._lock:
            if mapper.id not in self._mappers:
                raise ValidationError(f"Mapper with ID '{mapper.id}' is not registered")
            mapper.validate()
            self._mappers[mapper.id] = mapper

    def register_or_update(self, mapper: Mapper) -> None:
        with self._lock:
            mapper.validate()
            self._mappers[mapper.id] = mapper

    def unregister(self, mapper_id: str) -> bool:
        with self._lock:
            removed = self._mappers.pop(mapper_id, None) is not None
        if removed:
            logger.debug("Unregistered mapper %s", mapper_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._mappers.clear()

    # ── Lookup ─────────────────────────────────────────────────────

    def get(self, mapper_id: str) -> Optional[Mapper]:
        with self._lock:
            return self._mappers.get(mapper_id)

    def has(self, mapper_id: str) -> bool:
        with self._lock:
            return mapper_id in self._mappers

    def list(self) -> list[str]:
        with self._lock:
            return list(self._mappers)

    def count(self) -> int:
        with self._lock:
            return len(self._mappers)

    def by_type(self, mapper_type: MapperType | str) -> list[Mapper]:
        mapper_type = MapperType(mapper_type)
        with self._lock:
            return [m for m in self._mappers.values() if m.mapper_type is mapper_type]

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, mapper_id: object) -> bool:
        return isinstance(mapper_id, str) and self.has(mapper_id)

    # ── Metadata & export ──────────────────────────────────────────

    def metadata(self, mapper_id: str) -> Optional[dict[str, Any]]:
        mapper = self.get(mapper_id)
        return _describe(mapper) if mapper is not None else None

    def list_metadata(self) -> list[dict[str, Any]]:
        with self._lock:
            return [_describe(m) for m in self._mappers.values()]

    def export(self) -> list[dict[str, Any]]:
        """Configurations of all mappers, re-importable via :meth:`import_configs`."""
        with self._lock:
            return [
                {"type": m.mapper_type.value, **m.parameters.to_dict()}
                for m in self._mappers.values()
            ]

    def import_configs(
        self,
        configs: Iterable[Mapping[str, Any]],
        replace: bool = False,
        validator: Optional[MapperValidator] = None,
    ) -> list[str]:
        """Build and register mappers from exported configurations.

        All configurations are validated before any is registered.

        Returns:
            The ids of the imported mappers.
        """
        validator = validator or MapperValidator()
        mappers = [validator.create_mapper(c) for c in configs]
        with self._lock:
            if not replace:
                for mapper in mappers:
                    if mapper.id in self._mappers:
                        raise ValidationError(
                            f"Mapper with ID '{mapper.id}' already exists. "
                            "Use replace=True to overwrite."
                        )
            for mapper in mappers:
                self._mappers[mapper.id] = mapper
        return [m.id for m in mappers]

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "timestamp": utc_timestamp(),
                "count": len(self._mappers),
                "mappers": self.export(),
            }

    def stats(self) -> dict[str, Any]:
        with self._lock:
            by_type = Counter(m.mapper_type.value for m in self._mappers.values())
            return {
                "total": len(self._mappers),
                "by_type": dict(by_type),
                "types": list(by_type),
            }
