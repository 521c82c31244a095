from __future__ import annotations

import math
from typing import NamedTuple, Tuple

from shapely.geometry import Point as ShapelyPoint

from projection_cs.utils.exceptions import MalformedGeometryError


class Coordinate(NamedTuple):
    """
    A single 2D position in internal (x, y) order.

    x is the longitude in geographic systems and the easting in projected systems; y is
    the latitude or the northing. The order never depends on the CRS: the axis order of
    a CRS only decides how external, named fields map onto x and y.

    Attributes:
        x: The first axis value (longitude or easting)
        y: The second axis value (latitude or northing)

    Examples:
        >>> from projection_cs.constructs.coordinate import Coordinate
        >>> istanbul = Coordinate.from_lat_lon(41.0082, 28.9784)
        >>> istanbul.x, istanbul.y
        (28.9784, 41.0082)
    """

    x: float
    y: float

    def __repr__(self):
        return f"Coordinate(x={self.x}, y={self.y})"

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> Coordinate:
        """
        Create a coordinate from latitude and longitude values in decimal degrees.

        Args:
            lat: The latitude (range: -90 to 90)
            lon: The longitude (range: -180 to 180)

        Returns:
            A new Coordinate with x = lon and y = lat
        """
        return cls(x=float(lon), y=float(lat))

    @classmethod
    def from_easting_northing(cls, easting: float, northing: float) -> Coordinate:
        return cls(x=float(easting), y=float(northing))

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_shapely(self) -> ShapelyPoint:
        return ShapelyPoint(self.x, self.y)


def to_coordinate(value) -> Coordinate:
    """
    Coerce a Coordinate or an (x, y) pair into a finite Coordinate.

    Args:
        value: A Coordinate, or any indexable pair of numbers in internal (x, y) order

    Returns:
        The Coordinate

    Raises:
        MalformedGeometryError: If value is not a numeric pair or a value is not finite
    """
    if isinstance(value, Coordinate):
        c = value
    elif isinstance(value, (str, bytes)):
        raise MalformedGeometryError(f"not a coordinate pair: {value!r}")
    else:
        try:
            c = Coordinate(float(value[0]), float(value[1]))
        except (TypeError, ValueError, IndexError, KeyError) as e:
            raise MalformedGeometryError(f"not a coordinate pair: {value!r}") from e

    if not c.is_finite:
        raise MalformedGeometryError(f"coordinate values must be finite, got {c}")
    return c
