from __future__ import annotations

import collections.abc
import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from projection_cs.constructs.coordinate import Coordinate, to_coordinate
from projection_cs.utils.crs import AxisOrder, CRSRegistry, default_registry
from projection_cs.utils.exceptions import MalformedGeometryError

log = logging.getLogger(__name__)

ExternalPoint = Union[Coordinate, Sequence[float], Mapping[str, float]]


class AxisOrderResolver:
    """
    Decides how the external fields of a point map onto internal (x, y) for a CRS.

    Classification is a pure function of the identifier: known identifiers take the axis
    order recorded in the registry, unknown ones fall back to AxisOrder.PROJECTED with a
    warning. The resolver never fails.

    Args:
        registry: The CRS registry to classify against. Defaults to the built-in registry.

    Examples:
        >>> resolver = AxisOrderResolver()
        >>> resolver.classify("EPSG:4326")
        <AxisOrder.GEOGRAPHIC: 'geographic'>
        >>> resolver.to_internal({"latitude": 41.0, "longitude": 29.0}, "EPSG:4326")
        (29.0, 41.0)
    """

    def __init__(self, registry: Optional[CRSRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def classify(self, identifier: str) -> AxisOrder:
        definition = self.registry.lookup(identifier)
        if definition is None:
            log.warning(
                f"Unknown projection: {identifier}, using default easting/northing (x/y) coordinate order"
            )
            return AxisOrder.PROJECTED

        return definition.axis_order

    def to_internal(self, point: ExternalPoint, identifier: str) -> Tuple[float, float]:
        """
        Interpret a point given in the conventions of a CRS as internal (x, y).

        Args:
            point: A Coordinate or an (x, y) pair, both already in internal order, or a
                mapping keyed by the axis field names of the CRS ('longitude'/'latitude'
                for geographic systems, 'easting'/'northing' for projected ones)
            identifier: The CRS the point is expressed in

        Returns:
            The internal (x, y) pair

        Raises:
            MalformedGeometryError: If a mapping lacks one of the expected fields, or a
                value is not a finite number
        """
        if not isinstance(point, collections.abc.Mapping):
            return to_coordinate(point).xy

        x_field, y_field = self.classify(identifier).fields
        missing = [f for f in (x_field, y_field) if f not in point]
        if missing:
            raise MalformedGeometryError(
                f"point {dict(point)} has no {missing[0]} field required by {identifier}"
            )

        return to_coordinate((point[x_field], point[y_field])).xy

    def to_external(self, coordinate: Coordinate, identifier: str) -> Dict[str, float]:
        """Name the axes of a coordinate after the conventions of a CRS."""
        x_field, y_field = self.classify(identifier).fields
        return {x_field: coordinate.x, y_field: coordinate.y}
