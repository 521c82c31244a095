"""Coordinate Reference System (CRS) registry used throughout projection_cs.

This module defines the CRS identifiers projection_cs knows about and the PROJ
definition string each one maps to:
- Turkish national 3-degree Transverse Mercator grids (ITRF96 and ED50)
- UTM 6-degree zones 35-38 (ED50 and ITRF96)
- SR-ORG aliases of the ITRF96 3-degree grids
- WGS84 geographic (EPSG:4326) and Web Mercator (EPSG:3857)

The axis order class of every entry is looked up in the PROJ database through
pyproj rather than being hand-maintained next to the definition.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from pyproj import CRS
from pyproj.exceptions import CRSError

log = logging.getLogger(__name__)

# WGS84 latitude/longitude coordinate system
LATLON_CRS = "EPSG:4326"

# Web Mercator projected coordinate system, coordinates in meters (easting, northing)
WEB_MERCATOR_CRS = "EPSG:3857"

# Target used when a source CRS is given without a target
DEFAULT_TARGET_CRS = LATLON_CRS

_TM_ITRF96 = (
    "+proj=tmerc +lat_0=0 +lon_0={cm} +k=1 +x_0=500000 +y_0=0 +ellps=GRS80 "
    "+towgs84=0,0,0,0,0,0,0 +units=m +no_defs +type=crs"
)
_TM_ED50 = (
    "+proj=tmerc +lat_0=0 +lon_0={cm} +k=1 +x_0=500000 +y_0=0 +ellps=intl "
    "+units=m +no_defs"
)
_UTM_ED50 = "+proj=utm +zone={zone} +ellps=intl +units=m +no_defs"
_UTM_ITRF96 = "+proj=utm +zone={zone} +datum=WGS84 +units=m +no_defs +type=crs"

_WEB_MERCATOR = (
    "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 +k=1 "
    "+units=m +nadgrids=@null +wktext +no_defs +type=crs"
)
_WGS84 = "+proj=longlat +datum=WGS84 +no_defs +type=crs"

_CENTRAL_MERIDIANS = (27, 30, 33, 36, 39, 42, 45)
_UTM_ZONES = (35, 36, 37, 38)


def _builtin_definitions() -> Dict[str, str]:
    definitions = {}
    for cm in _CENTRAL_MERIDIANS:
        definitions[f"ITRF96_3DEG_TM{cm}"] = _TM_ITRF96.format(cm=cm)
    for cm in _CENTRAL_MERIDIANS:
        definitions[f"ED50_3DEG_TM{cm}"] = _TM_ED50.format(cm=cm)
    for zone in _UTM_ZONES:
        definitions[f"ED50_6DEG_ZONE{zone}"] = _UTM_ED50.format(zone=zone)
    for zone in _UTM_ZONES:
        definitions[f"ITRF96_6DEG_ZONE{zone}"] = _UTM_ITRF96.format(zone=zone)
    # SR-ORG:7931 .. SR-ORG:7937 follow the central meridians in order
    for code, cm in zip(range(7931, 7938), _CENTRAL_MERIDIANS):
        definitions[f"SR-ORG:{code}"] = _TM_ITRF96.format(cm=cm)

    definitions["EPSG:3857"] = _WEB_MERCATOR
    definitions["EPSG3857"] = _WEB_MERCATOR
    definitions["WEB_MERCATOR"] = _WEB_MERCATOR
    definitions["EPSG:4326"] = _WGS84
    definitions["EPSG4326"] = _WGS84

    return definitions


class AxisOrder(Enum):
    """
    The axis order class of a CRS.

    Attributes:
        GEOGRAPHIC: angular units, conventional external order is (longitude, latitude)
        PROJECTED: linear units, conventional external order is (easting, northing)
    """

    GEOGRAPHIC = "geographic"
    PROJECTED = "projected"

    @property
    def fields(self) -> tuple:
        """Names of the external fields holding internal x and y, in that order."""
        if self is AxisOrder.GEOGRAPHIC:
            return ("longitude", "latitude")
        return ("easting", "northing")


def axis_order_of(definition: str) -> AxisOrder:
    """
    Look up the axis order class of a PROJ definition in the PROJ database.

    Args:
        definition: A PROJ definition string (or anything pyproj.CRS accepts)

    Returns:
        AxisOrder.GEOGRAPHIC for angular systems, AxisOrder.PROJECTED otherwise

    Raises:
        ValueError: If pyproj cannot parse the definition
    """
    try:
        crs = CRS.from_user_input(definition)
    except CRSError as e:
        raise ValueError(f"Could not parse CRS definition: {definition}") from e

    if crs.is_geographic:
        return AxisOrder.GEOGRAPHIC
    return AxisOrder.PROJECTED


class CRSDefinition(NamedTuple):
    """
    A single registry entry.

    Attributes:
        identifier: The CRS identifier, e.g. 'EPSG:4326' or 'ITRF96_3DEG_TM30'
        definition: The PROJ definition string forwarded to the projection engine
        axis_order: The axis order class of the CRS
    """

    identifier: str
    definition: str
    axis_order: AxisOrder

    @classmethod
    def from_definition(cls, identifier: str, definition: str) -> CRSDefinition:
        return cls(identifier, definition, axis_order_of(definition))


class CRSRegistry:
    """
    An immutable table of known CRS identifiers.

    The registry is the single source of truth for which identifiers can be used in a
    conversion. It never changes after construction; extending it returns a new registry,
    so a registry can be shared between threads without locking.

    Args:
        definitions: The registry entries. Identifiers must be unique.

    Examples:
        >>> registry = CRSRegistry.from_definitions({"EPSG:4326": "+proj=longlat +datum=WGS84 +no_defs"})
        >>> registry.is_known("EPSG:4326")
        True
        >>> registry.lookup("EPSG:4326").axis_order
        <AxisOrder.GEOGRAPHIC: 'geographic'>
    """

    def __init__(self, definitions: Iterable[CRSDefinition]):
        table: Dict[str, CRSDefinition] = {}
        for d in definitions:
            if d.identifier in table:
                raise ValueError(f"duplicate CRS identifier {d.identifier}")
            table[d.identifier] = d
        self._table = table

    def __len__(self):
        return len(self._table)

    def __contains__(self, identifier) -> bool:
        return identifier in self._table

    def __repr__(self):
        return f"CRSRegistry({len(self)} definitions)"

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, str]) -> CRSRegistry:
        """
        Build a registry from identifier -> PROJ definition pairs.

        The axis order class of each entry is read from the PROJ database.

        Args:
            definitions: A mapping of CRS identifier to PROJ definition string

        Returns:
            A new CRSRegistry
        """
        return cls(
            CRSDefinition.from_definition(identifier, definition)
            for identifier, definition in definitions.items()
        )

    def lookup(self, identifier: str) -> Optional[CRSDefinition]:
        """Return the entry for an identifier, or None if it is not known."""
        return self._table.get(identifier)

    def is_known(self, identifier: str) -> bool:
        return identifier in self._table

    def list_known(self) -> List[str]:
        return list(self._table)

    def extend(self, definitions: Mapping[str, str]) -> CRSRegistry:
        """
        Return a new registry with extra identifier -> PROJ definition pairs added.

        Args:
            definitions: The new entries. They must not redefine a known identifier.

        Returns:
            A new CRSRegistry; this registry is left untouched
        """
        extra = CRSRegistry.from_definitions(definitions)
        return CRSRegistry([*self._table.values(), *extra._table.values()])


_default_registry: Optional[CRSRegistry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> CRSRegistry:
    """
    The registry of built-in CRS definitions.

    Built on first use and shared for the rest of the process lifetime.
    """
    global _default_registry

    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                log.debug("building default CRS registry")
                _default_registry = CRSRegistry.from_definitions(
                    _builtin_definitions()
                )

    return _default_registry
