from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Type, TypeVar

import shapely.geometry as sg
from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

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
)
from projection_cs.constructs.result import TransformResult
from projection_cs.converters.projection_converter import ProjectionConverter
from projection_cs.utils.crs import DEFAULT_TARGET_CRS
from projection_cs.utils.exceptions import (
    MalformedGeometryError,
    NotationParseError,
    ProjectionError,
    UnsupportedGeometryKindError,
)

log = logging.getLogger(__name__)

G = TypeVar("G", Point, LineString, Polygon)

GEOS_ILLEGAL_ARGUMENT = "IllegalArgumentException"


def _coords(seq) -> tuple:
    # third ordinates are dropped, everything here is 2D
    return tuple(Coordinate(float(c[0]), float(c[1])) for c in seq.coords)


def _point(geom: sg.Point) -> Point:
    if geom.is_empty:
        raise MalformedGeometryError("POINT EMPTY has no coordinate")
    return Point(Coordinate(float(geom.x), float(geom.y)))


def _line_string(geom: sg.LineString) -> LineString:
    return LineString(_coords(geom))


def _polygon(geom: sg.Polygon) -> Polygon:
    if geom.is_empty:
        raise MalformedGeometryError("POLYGON EMPTY has no exterior ring")
    return Polygon(
        exterior=_coords(geom.exterior),
        interiors=tuple(_coords(ring) for ring in geom.interiors),
    )


def _multi_point(geom: sg.MultiPoint) -> MultiPoint:
    return MultiPoint(tuple(_point(p) for p in geom.geoms))


def _multi_line_string(geom: sg.MultiLineString) -> MultiLineString:
    return MultiLineString(tuple(_line_string(line) for line in geom.geoms))


def _multi_polygon(geom: sg.MultiPolygon) -> MultiPolygon:
    return MultiPolygon(tuple(_polygon(p) for p in geom.geoms))


def _geometry_collection(geom: sg.GeometryCollection) -> GeometryCollection:
    return GeometryCollection(tuple(classify(g) for g in geom.geoms))


# keyed by the shapely geom_type of the parsed geometry
_CLASSIFIERS: Dict[str, Callable[[BaseGeometry], Geometry]] = {
    "Point": _point,
    "LineString": _line_string,
    "Polygon": _polygon,
    "MultiPoint": _multi_point,
    "MultiLineString": _multi_line_string,
    "MultiPolygon": _multi_polygon,
    "GeometryCollection": _geometry_collection,
}


def classify(geom: BaseGeometry) -> Geometry:
    """
    Turn a parsed shapely geometry into the matching geometry variant.

    Args:
        geom: A geometry produced by the WKT reader

    Returns:
        The geometry variant of the same kind, with the same structure and coordinates

    Raises:
        UnsupportedGeometryKindError: If the geometry kind is not one of the seven variants
            (e.g. a bare LinearRing)
        MalformedGeometryError: If the parsed geometry violates a structural precondition
    """
    classifier = _CLASSIFIERS.get(geom.geom_type)
    if classifier is None:
        raise UnsupportedGeometryKindError(geom.geom_type)

    return classifier(geom)


class WKTParser:
    """
    Parses WKT text into geometry variants, optionally converting their coordinates.

    Tokenizing and grammar are delegated to shapely's WKT reader. Parsing never raises
    for bad input: every method returns a TransformResult.

    When a source CRS is given the parsed geometry is converted to the target CRS. If no
    target CRS is given, DEFAULT_TARGET_CRS (EPSG:4326, WGS84 longitude/latitude) is used.

    Args:
        converter: The converter used when a source CRS is given. Defaults to a
            ProjectionConverter over the built-in registry.

    Examples:
        >>> parser = WKTParser()
        >>> result = parser.parse("GEOMETRYCOLLECTION(POINT(1 1), LINESTRING(1 1, 2 2))")
        >>> [g.kind for g in result.value]
        [<GeometryKind.POINT: 'Point'>, <GeometryKind.LINE_STRING: 'LineString'>]
        >>>
        >>> # UTM zone 35 (ED50) to WGS84
        >>> parser.parse_as_point("POINT(500000 4540000)", source_crs="ED50_6DEG_ZONE35").value
        Point(coordinate=Coordinate(x=27.0..., y=41.0...))
    """

    def __init__(self, converter: Optional[ProjectionConverter] = None):
        self.converter = converter if converter is not None else ProjectionConverter()

    def parse(
        self,
        text: str,
        source_crs: Optional[str] = None,
        target_crs: Optional[str] = None,
    ) -> TransformResult[Geometry]:
        """
        Parse WKT text into a geometry variant.

        Args:
            text: The WKT text, e.g. 'POLYGON((0 0, 1 0, 1 1, 0 0))'
            source_crs: The CRS the coordinates in text are expressed in. If None, the
                coordinates are kept as they are.
            target_crs: The CRS to convert into. Only used with source_crs; defaults to
                DEFAULT_TARGET_CRS.

        Returns:
            A success holding the geometry variant, or a failure of kind
            NOTATION_PARSE_FAILURE, UNSUPPORTED_GEOMETRY_KIND, MALFORMED_GEOMETRY,
            UNKNOWN_CRS or PROJECTION_FAILURE
        """
        try:
            geometry = self._read(text)
        except ProjectionError as e:
            return TransformResult.failure(e)

        if source_crs is None:
            return TransformResult.success(geometry)

        if target_crs is None:
            target_crs = DEFAULT_TARGET_CRS

        return self.converter.transform(geometry, source_crs, target_crs)

    def _read(self, text: str) -> Geometry:
        if text is None or not text.strip():
            raise NotationParseError("WKT string is empty")

        try:
            parsed = shapely_wkt.loads(text)
        except ShapelyError as e:
            # GEOS reports structural violations (too few points) separately from syntax errors
            if str(e).startswith(GEOS_ILLEGAL_ARGUMENT):
                raise MalformedGeometryError(f"Malformed WKT geometry: {e}") from e
            raise NotationParseError(f"Failed to parse WKT: {e}") from e

        geometry = classify(parsed)
        log.debug(f"classified WKT as {geometry.kind.value}")

        return geometry

    def _parse_as(
        self,
        expected: Type[G],
        text: str,
        source_crs: Optional[str],
        target_crs: Optional[str],
    ) -> TransformResult[G]:
        result = self.parse(text, source_crs, target_crs)
        if result.is_failure:
            return result

        if not isinstance(result.value, expected):
            return TransformResult.failure(
                UnsupportedGeometryKindError(
                    f"expected {expected.kind.value}, got {result.value.kind.value}"
                )
            )

        return result

    def parse_as_point(
        self,
        text: str,
        source_crs: Optional[str] = None,
        target_crs: Optional[str] = None,
    ) -> TransformResult[Point]:
        """Parse WKT text that must hold a Point; any other kind is a failure."""
        return self._parse_as(Point, text, source_crs, target_crs)

    def parse_as_line_string(
        self,
        text: str,
        source_crs: Optional[str] = None,
        target_crs: Optional[str] = None,
    ) -> TransformResult[LineString]:
        """Parse WKT text that must hold a LineString; any other kind is a failure."""
        return self._parse_as(LineString, text, source_crs, target_crs)

    def parse_as_polygon(
        self,
        text: str,
        source_crs: Optional[str] = None,
        target_crs: Optional[str] = None,
    ) -> TransformResult[Polygon]:
        """Parse WKT text that must hold a Polygon; any other kind is a failure."""
        return self._parse_as(Polygon, text, source_crs, target_crs)


def serialize(geometry: Geometry, rounding_precision: int = -1) -> str:
    """
    Write a geometry variant as WKT text.

    Numbers are always written with a '.' decimal point and no grouping separators,
    whatever the process locale.

    Args:
        geometry: The geometry to write
        rounding_precision: Number of decimals to round coordinates to; -1 keeps full precision

    Returns:
        The WKT text, e.g. 'POINT (28.9784 41.0082)'
    """
    return geometry.to_wkt(rounding_precision)
