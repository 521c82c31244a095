"""Recursive coordinate transformation of geometry variants.

The functions here only rebuild structure; the numeric work is done by the point and
batch conversion callables handed in, already bound to a source and target CRS.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, assert_never

from projection_cs.constructs.coordinate import Coordinate
from projection_cs.constructs.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Ring,
    is_closed,
)


ConvertPoint = Callable[[Coordinate], Coordinate]
ConvertPoints = Callable[[Sequence[Coordinate]], List[Coordinate]]


def transform_ring(ring: Ring, convert_points: ConvertPoints) -> Ring:
    """
    Transform the coordinates of a polygon ring, keeping it closed.

    Closure is structural: when the input ring is closed, the last output coordinate is
    set to the first one, whatever numeric drift the projection introduced.

    Args:
        ring: The ring coordinates
        convert_points: Converts a sequence of coordinates, same length and order

    Returns:
        The transformed ring with the same number of coordinates
    """
    new_ring = list(convert_points(ring))
    if is_closed(ring) and new_ring[0] != new_ring[-1]:
        new_ring[-1] = new_ring[0]

    return tuple(new_ring)


def transform_point(point: Point, convert_point: ConvertPoint) -> Point:
    return Point(convert_point(point.coordinate))


def transform_line_string(
    line: LineString, convert_points: ConvertPoints
) -> LineString:
    return LineString(tuple(convert_points(line.coords)))


def transform_polygon(polygon: Polygon, convert_points: ConvertPoints) -> Polygon:
    exterior = transform_ring(polygon.exterior, convert_points)
    interiors = tuple(transform_ring(r, convert_points) for r in polygon.interiors)

    return Polygon(exterior=exterior, interiors=interiors)


def transform_geometry(
    geometry: Geometry,
    convert_point: ConvertPoint,
    convert_points: ConvertPoints,
) -> Geometry:
    """
    Transform every coordinate of a geometry, preserving its structure.

    The result has the same kind as the input, the same number of rings, members and
    sub-geometries, and the same number of coordinates in every ring and line. Geometry
    collections are walked recursively, so collections nested at any depth are handled.

    Args:
        geometry: The geometry to transform
        convert_point: Converts a single coordinate
        convert_points: Converts a sequence of coordinates, same length and order

    Returns:
        A new geometry of the same kind holding the converted coordinates

    Raises:
        ProjectionError: Whatever the conversion callables raise; nothing is returned
            for a partially transformed geometry

    Examples:
        >>> swap = lambda c: Coordinate(c.y, c.x)
        >>> transform_geometry(line, swap, lambda cs: [swap(c) for c in cs])
    """
    if isinstance(geometry, Point):
        return transform_point(geometry, convert_point)
    elif isinstance(geometry, LineString):
        return transform_line_string(geometry, convert_points)
    elif isinstance(geometry, Polygon):
        return transform_polygon(geometry, convert_points)
    elif isinstance(geometry, MultiPoint):
        return MultiPoint(
            tuple(transform_point(p, convert_point) for p in geometry.points)
        )
    elif isinstance(geometry, MultiLineString):
        return MultiLineString(
            tuple(transform_line_string(line, convert_points) for line in geometry.lines)
        )
    elif isinstance(geometry, MultiPolygon):
        return MultiPolygon(
            tuple(transform_polygon(p, convert_points) for p in geometry.polygons)
        )
    elif isinstance(geometry, GeometryCollection):
        return GeometryCollection(
            tuple(
                transform_geometry(g, convert_point, convert_points)
                for g in geometry.geometries
            )
        )
    else:
        assert_never(geometry)
