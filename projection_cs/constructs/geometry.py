"""The closed set of geometry variants projection_cs works with.

Every variant is an immutable value validated at construction. Code that dispatches on a
variant handles all seven of them and ends with ``assert_never`` so that a type checker
flags a dispatch that misses one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable, Iterator, Sequence, Tuple, Union

import shapely.geometry as sg
from shapely import wkt as shapely_wkt

from projection_cs.constructs.coordinate import Coordinate, to_coordinate
from projection_cs.utils.exceptions import MalformedGeometryError

Ring = Tuple[Coordinate, ...]

MIN_LINE_POINTS = 2
MIN_RING_POINTS = 4


class GeometryKind(Enum):
    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


def _to_coordinates(values: Iterable) -> Tuple[Coordinate, ...]:
    return tuple(to_coordinate(v) for v in values)


def is_closed(ring: Sequence[Coordinate]) -> bool:
    return len(ring) > 0 and ring[0] == ring[-1]


def close_ring(ring: Sequence[Coordinate]) -> Ring:
    """Return the ring with its first coordinate repeated at the end, if it is open."""
    ring = _to_coordinates(ring)
    if ring and not is_closed(ring):
        ring = ring + (ring[0],)
    return ring


def _validate_ring(ring: Ring, name: str):
    if len(ring) < MIN_RING_POINTS:
        raise MalformedGeometryError(
            f"{name} must have at least {MIN_RING_POINTS} coordinates, got {len(ring)}"
        )
    if not is_closed(ring):
        raise MalformedGeometryError(
            f"{name} is not closed: first coordinate {ring[0]} != last coordinate {ring[-1]}"
        )


@dataclass(frozen=True)
class Point:
    coordinate: Coordinate

    kind: ClassVar[GeometryKind] = GeometryKind.POINT

    def __post_init__(self):
        object.__setattr__(self, "coordinate", to_coordinate(self.coordinate))

    @property
    def x(self) -> float:
        return self.coordinate.x

    @property
    def y(self) -> float:
        return self.coordinate.y

    def to_shapely(self) -> sg.Point:
        return sg.Point(self.coordinate.xy)

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class LineString:
    """
    An ordered sequence of at least two coordinates.

    Attributes:
        coords: The coordinates of the line, in order
    """

    coords: Tuple[Coordinate, ...]

    kind: ClassVar[GeometryKind] = GeometryKind.LINE_STRING

    def __post_init__(self):
        coords = _to_coordinates(self.coords)
        if len(coords) < MIN_LINE_POINTS:
            raise MalformedGeometryError(
                f"LineString must have at least {MIN_LINE_POINTS} coordinates, got {len(coords)}"
            )
        object.__setattr__(self, "coords", coords)

    def __len__(self):
        return len(self.coords)

    def to_shapely(self) -> sg.LineString:
        return sg.LineString([c.xy for c in self.coords])

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class Polygon:
    """
    An exterior ring plus zero or more interior rings (holes).

    Every ring must hold at least four coordinates and be closed, i.e. its first
    coordinate equals its last. Building a Polygon directly rejects open rings; use
    Polygon.from_coords to close them explicitly.

    Attributes:
        exterior: The closed outer boundary
        interiors: The closed boundaries of the holes, in order

    Examples:
        >>> triangle = [(0, 0), (1, 0), (0, 1)]
        >>> Polygon(triangle)  # raises MalformedGeometryError, the ring is open
        >>> Polygon.from_coords(triangle).exterior[-1]
        Coordinate(x=0.0, y=0.0)
    """

    exterior: Ring
    interiors: Tuple[Ring, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    def __post_init__(self):
        exterior = _to_coordinates(self.exterior)
        _validate_ring(exterior, "Polygon exterior ring")

        interiors = tuple(_to_coordinates(r) for r in self.interiors)
        for i, ring in enumerate(interiors):
            _validate_ring(ring, f"Polygon interior ring {i}")

        object.__setattr__(self, "exterior", exterior)
        object.__setattr__(self, "interiors", interiors)

    @classmethod
    def from_coords(
        cls,
        exterior: Sequence,
        interiors: Sequence[Sequence] = (),
        close: bool = True,
    ) -> Polygon:
        """
        Build a polygon from coordinate sequences.

        Args:
            exterior: The outer boundary coordinates
            interiors: The hole boundaries
            close: If True, open rings are closed by repeating their first coordinate.
                If False, open rings are rejected like in direct construction.

        Returns:
            A new Polygon

        Raises:
            MalformedGeometryError: If a ring has too few coordinates, or is open and
                close is False
        """
        if close:
            exterior = close_ring(exterior)
            interiors = [close_ring(r) for r in interiors]

        return cls(exterior=tuple(exterior), interiors=tuple(tuple(r) for r in interiors))

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return (self.exterior, *self.interiors)

    def to_shapely(self) -> sg.Polygon:
        return sg.Polygon(
            [c.xy for c in self.exterior],
            [[c.xy for c in ring] for ring in self.interiors],
        )

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class MultiPoint:
    points: Tuple[Point, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POINT

    def __post_init__(self):
        points = tuple(p if isinstance(p, Point) else Point(p) for p in self.points)
        object.__setattr__(self, "points", points)

    def __len__(self):
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def to_shapely(self) -> sg.MultiPoint:
        return sg.MultiPoint([p.coordinate.xy for p in self.points])

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class MultiLineString:
    lines: Tuple[LineString, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_LINE_STRING

    def __post_init__(self):
        lines = tuple(
            line if isinstance(line, LineString) else LineString(line)
            for line in self.lines
        )
        object.__setattr__(self, "lines", lines)

    def __len__(self):
        return len(self.lines)

    def __iter__(self) -> Iterator[LineString]:
        return iter(self.lines)

    def to_shapely(self) -> sg.MultiLineString:
        return sg.MultiLineString([[c.xy for c in line.coords] for line in self.lines])

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class MultiPolygon:
    polygons: Tuple[Polygon, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POLYGON

    def __post_init__(self):
        for p in self.polygons:
            if not isinstance(p, Polygon):
                raise MalformedGeometryError(
                    f"MultiPolygon members must be Polygons, got {type(p).__name__}"
                )
        object.__setattr__(self, "polygons", tuple(self.polygons))

    def __len__(self):
        return len(self.polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.polygons)

    def to_shapely(self) -> sg.MultiPolygon:
        return sg.MultiPolygon([p.to_shapely() for p in self.polygons])

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


@dataclass(frozen=True)
class GeometryCollection:
    """
    An ordered sequence of geometries of any kind, including other collections.

    Attributes:
        geometries: The member geometries, in order
    """

    geometries: Tuple[Geometry, ...] = ()

    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRY_COLLECTION

    def __post_init__(self):
        for g in self.geometries:
            if not isinstance(g, GEOMETRY_TYPES):
                raise MalformedGeometryError(
                    f"GeometryCollection members must be geometries, got {type(g).__name__}"
                )
        object.__setattr__(self, "geometries", tuple(self.geometries))

    def __len__(self):
        return len(self.geometries)

    def __iter__(self) -> Iterator[Geometry]:
        return iter(self.geometries)

    def __getitem__(self, i) -> Geometry:
        return self.geometries[i]

    def to_shapely(self) -> sg.GeometryCollection:
        return sg.GeometryCollection([g.to_shapely() for g in self.geometries])

    def to_wkt(self, rounding_precision: int = -1) -> str:
        return _dumps(self, rounding_precision)


Geometry = Union[
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
]

GEOMETRY_TYPES = (
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
)


def _dumps(geometry: Geometry, rounding_precision: int) -> str:
    # shapely's writer is locale independent: '.' decimal point, no grouping
    return shapely_wkt.dumps(
        geometry.to_shapely(), trim=True, rounding_precision=rounding_precision
    )
