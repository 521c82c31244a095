from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from projection_cs.constructs.coordinate import Coordinate
from projection_cs.constructs.geometry import (
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
from projection_cs.parsers.wkt_parser import WKTParser
from projection_cs.utils.axis_order import ExternalPoint
from projection_cs.utils.exceptions import (
    MalformedGeometryError,
    ProjectionError,
    UnknownCRSError,
)

log = logging.getLogger(__name__)


class WKTGenerator:
    """
    Builds WKT text from coordinate lists, converting the coordinates between CRSs first.

    Polygon rings are closed on construction: an open ring gets its first coordinate
    repeated at the end.

    Args:
        converter: Converts the input coordinates. Defaults to a ProjectionConverter over
            the built-in registry.
        rounding_precision: Number of decimals written for each coordinate; -1 keeps full precision

    Examples:
        >>> generator = WKTGenerator()
        >>> generator.create_line_string(
        ...     [Coordinate.from_lat_lon(41.0082, 28.9784), Coordinate.from_lat_lon(39.9334, 32.8597)],
        ...     "EPSG:4326",
        ...     "EPSG:3857",
        ... ).value
        'LINESTRING (3225860.8... 5013551.0..., 3657894.1... 4858118.9...)'
    """

    def __init__(
        self,
        converter: Optional[ProjectionConverter] = None,
        rounding_precision: int = -1,
    ):
        self.converter = converter if converter is not None else ProjectionConverter()
        self.parser = WKTParser(self.converter)
        self.rounding_precision = rounding_precision

    def _convert(
        self, coordinates: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> List[Coordinate]:
        return self.converter.convert_all(coordinates, source_crs, target_crs).unwrap()

    def _convert_ring(
        self, ring: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> List[Coordinate]:
        converted = self._convert(ring, source_crs, target_crs)
        # a ring that was closed on input stays exactly closed
        if len(ring) > 1 and ring[0] == ring[-1]:
            converted[-1] = converted[0]
        return converted

    def _require(self, items: Sequence, minimum: int, what: str):
        if len(items) < minimum:
            raise MalformedGeometryError(
                f"At least {minimum} {what} required, got {len(items)}"
            )

    def create_point(
        self, coordinates: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> TransformResult[str]:
        """
        Create POINT text from the first of the given coordinates.

        Args:
            coordinates: At least one coordinate; only the first is used
            source_crs: The CRS the coordinates are in
            target_crs: The CRS to write the point in

        Returns:
            A success holding the WKT text, or a failure
        """
        try:
            self._require(coordinates, 1, "coordinate for POINT geometry")
            point = Point(self._convert(coordinates[:1], source_crs, target_crs)[0])
            return TransformResult.success(point.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def create_line_string(
        self, coordinates: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> TransformResult[str]:
        try:
            self._require(coordinates, 2, "coordinates for LINESTRING geometry")
            line = LineString(tuple(self._convert(coordinates, source_crs, target_crs)))
            return TransformResult.success(line.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def _polygon(
        self,
        coordinates: Sequence[ExternalPoint],
        holes: Sequence[Sequence[ExternalPoint]],
        source_crs: str,
        target_crs: str,
    ) -> Polygon:
        self._require(coordinates, 3, "coordinates for POLYGON geometry")
        exterior = self._convert_ring(coordinates, source_crs, target_crs)
        interiors = []
        for hole in holes:
            self._require(hole, 3, "coordinates for each polygon hole")
            interiors.append(self._convert_ring(hole, source_crs, target_crs))

        return Polygon.from_coords(exterior, interiors, close=True)

    def create_polygon(
        self,
        coordinates: Sequence[ExternalPoint],
        source_crs: str,
        target_crs: str,
        holes: Optional[Sequence[Sequence[ExternalPoint]]] = None,
    ) -> TransformResult[str]:
        """
        Create POLYGON text from an exterior ring and optional holes.

        Rings are converted first and closed afterwards, so the closing coordinate is an
        exact copy of the converted first coordinate.

        Args:
            coordinates: The exterior ring, at least three coordinates, open or closed
            source_crs: The CRS the coordinates are in
            target_crs: The CRS to write the polygon in
            holes: Optional interior rings, each at least three coordinates

        Returns:
            A success holding the WKT text, or a failure
        """
        try:
            polygon = self._polygon(coordinates, holes or [], source_crs, target_crs)
            return TransformResult.success(polygon.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def create_multi_point(
        self, coordinates: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> TransformResult[str]:
        try:
            self._require(coordinates, 1, "coordinate for MULTIPOINT geometry")
            converted = self._convert(coordinates, source_crs, target_crs)
            multi = MultiPoint(tuple(Point(c) for c in converted))
            return TransformResult.success(multi.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def create_multi_line_string(
        self,
        coordinate_lists: Sequence[Sequence[ExternalPoint]],
        source_crs: str,
        target_crs: str,
    ) -> TransformResult[str]:
        try:
            self._require(coordinate_lists, 1, "coordinate list for MULTILINESTRING geometry")
            lines = []
            for coordinates in coordinate_lists:
                self._require(coordinates, 2, "coordinates for each linestring")
                lines.append(
                    LineString(tuple(self._convert(coordinates, source_crs, target_crs)))
                )
            multi = MultiLineString(tuple(lines))
            return TransformResult.success(multi.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def create_multi_polygon(
        self,
        coordinate_lists: Sequence[Sequence[ExternalPoint]],
        source_crs: str,
        target_crs: str,
    ) -> TransformResult[str]:
        """
        Create MULTIPOLYGON text, one hole-free polygon per coordinate list.

        Args:
            coordinate_lists: The exterior ring of each polygon, at least three coordinates each
            source_crs: The CRS the coordinates are in
            target_crs: The CRS to write the polygons in

        Returns:
            A success holding the WKT text, or a failure
        """
        try:
            self._require(coordinate_lists, 1, "coordinate list for MULTIPOLYGON geometry")
            polygons = tuple(
                self._polygon(coordinates, [], source_crs, target_crs)
                for coordinates in coordinate_lists
            )
            multi = MultiPolygon(polygons)
            return TransformResult.success(multi.to_wkt(self.rounding_precision))
        except ProjectionError as e:
            return TransformResult.failure(e)

    def create_geometry_collection(self, wkt_texts: Sequence[str]) -> TransformResult[str]:
        """
        Combine several WKT texts into GEOMETRYCOLLECTION text.

        Args:
            wkt_texts: The member geometries as WKT, in order

        Returns:
            A success holding the WKT text, or the failure of the first member that
            could not be parsed
        """
        members = []
        for text in wkt_texts:
            result = self.parser.parse(text)
            if result.is_failure:
                return TransformResult.failure(result.error)
            members.append(result.value)

        collection = GeometryCollection(tuple(members))
        return TransformResult.success(collection.to_wkt(self.rounding_precision))

    def convert_wkt(
        self, text: str, source_crs: str, target_crs: str
    ) -> TransformResult[str]:
        """
        Convert WKT text from one CRS to another.

        The text is returned unchanged when both identifiers are equal. Unknown identifiers
        fail before the text is parsed.

        Args:
            text: The WKT text
            source_crs: The CRS the coordinates in text are in
            target_crs: The CRS to write the geometry in

        Returns:
            A success holding the converted WKT text, or a failure
        """
        if source_crs == target_crs:
            return TransformResult.success(text)

        unknown = [
            c for c in (source_crs, target_crs) if not self.converter.registry.is_known(c)
        ]
        if unknown:
            return TransformResult.failure(UnknownCRSError(unknown))

        return self.parser.parse(text, source_crs, target_crs).map(
            lambda g: g.to_wkt(self.rounding_precision)
        )
