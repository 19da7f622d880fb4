"""
handover/data/ranges.py
───────────────────────
Equipment operating-range registry.

Lookup order for an (equipment_id, equipment_type, parameter) triple:
  1. instance override   keyed by (equipment_id, parameter)
  2. type default        keyed by (equipment_type, parameter), config/equipment.py
  3. FALLBACK_RANGE      0–100 normal, 0–150 critical, "units"

resolve_range() only reads. set_range() is the only write; last write wins.
resolve() chains the two the way reading capture needs: operator-supplied
normal bounds are remembered as an override for the next reading.
"""
from __future__ import annotations

import logging
import threading

from config.equipment import DEFAULT_RANGES, FALLBACK_RANGE, DefaultRange
from handover.data.models import EquipmentType, OperatingRange, Parameter

logger = logging.getLogger(__name__)


def _from_default(default: DefaultRange) -> OperatingRange:
    return OperatingRange(
        min=default.min,
        max=default.max,
        critical_min=default.critical_min,
        critical_max=default.critical_max,
        uom=default.uom,
    )


class EquipmentRangeRegistry:
    def __init__(
        self,
        defaults: dict[tuple[str, str], DefaultRange] | None = None,
        fallback: DefaultRange = FALLBACK_RANGE,
    ) -> None:
        self._lock = threading.RLock()
        self._defaults = {
            key: _from_default(value) for key, value in (defaults or DEFAULT_RANGES).items()
        }
        self._fallback = _from_default(fallback)
        self._overrides: dict[tuple[str, str], OperatingRange] = {}

    def default_range(self, equipment_type: EquipmentType | str, parameter: Parameter | str) -> OperatingRange:
        key = (EquipmentType(equipment_type).value, Parameter(parameter).value)
        return self._defaults.get(key, self._fallback)

    def resolve_range(
        self,
        equipment_id: str,
        equipment_type: EquipmentType | str,
        parameter: Parameter | str,
    ) -> OperatingRange:
        """Effective range for one equipment parameter. Never mutates."""
        with self._lock:
            override = self._overrides.get((equipment_id, Parameter(parameter).value))
        if override is not None:
            return override
        return self.default_range(equipment_type, parameter)

    def set_range(self, equipment_id: str, parameter: Parameter | str, operating_range: OperatingRange) -> None:
        with self._lock:
            self._overrides[(equipment_id, Parameter(parameter).value)] = operating_range
        logger.info(
            "Range override for %s %s: %s-%s %s (critical %s-%s)",
            equipment_id,
            Parameter(parameter).value,
            operating_range.min,
            operating_range.max,
            operating_range.uom,
            operating_range.critical_min,
            operating_range.critical_max,
        )

    def resolve(
        self,
        equipment_id: str,
        equipment_type: EquipmentType | str,
        parameter: Parameter | str,
        explicit_min: float | None = None,
        explicit_max: float | None = None,
        uom: str | None = None,
    ) -> OperatingRange:
        """
        Resolve the range for a new reading, applying operator-supplied bounds.

        With both bounds supplied, they are persisted as an override for
        (equipment_id, parameter). Critical bounds are always inherited from
        the range that was effective before. A single bound applies to this
        resolution only.

        Raises:
            pydantic.ValidationError: the supplied bounds do not nest inside
                the inherited critical band.
        """
        with self._lock:
            current = self.resolve_range(equipment_id, equipment_type, parameter)
            if explicit_min is None and explicit_max is None:
                return current

            effective = OperatingRange(
                min=current.min if explicit_min is None else explicit_min,
                max=current.max if explicit_max is None else explicit_max,
                critical_min=current.critical_min,
                critical_max=current.critical_max,
                uom=uom or current.uom,
            )
            if explicit_min is not None and explicit_max is not None:
                self.set_range(equipment_id, parameter, effective)
            return effective

    def custom_ranges(self) -> dict[tuple[str, str], OperatingRange]:
        """Snapshot of every instance override."""
        with self._lock:
            return dict(self._overrides)
