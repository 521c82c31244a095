from __future__ import annotations

import functools
import logging
from typing import List, Optional, Sequence, Tuple

from projection_cs.constructs.coordinate import Coordinate
from projection_cs.constructs.geometry import Geometry
from projection_cs.constructs.result import TransformResult
from projection_cs.converters.geometry_transformer import transform_geometry
from projection_cs.engines.engine_interface import ProjectionEngine
from projection_cs.engines.pyproj_engine import PyprojEngine
from projection_cs.utils.axis_order import AxisOrderResolver, ExternalPoint
from projection_cs.utils.crs import CRSDefinition, CRSRegistry, default_registry
from projection_cs.utils.exceptions import (
    ProjectionError,
    ProjectionFailureError,
    UnknownCRSError,
)

log = logging.getLogger(__name__)


class ProjectionConverter:
    """
    Converts coordinates and geometries between the CRS identifiers of a registry.

    The converter composes the CRS registry (identifier -> PROJ definition), the axis
    order resolver (external fields <-> internal x/y) and a projection engine (the
    numeric transform). Its public methods never raise for expected failures; they return
    a TransformResult holding either the converted value or the error.

    Args:
        registry: The known CRS identifiers. Defaults to the built-in registry.
        engine: The numeric backend. Defaults to a PyprojEngine.

    Examples:
        >>> from projection_cs.converters.projection_converter import ProjectionConverter
        >>> from projection_cs.constructs.coordinate import Coordinate
        >>>
        >>> converter = ProjectionConverter()
        >>> istanbul = Coordinate.from_lat_lon(41.0082, 28.9784)
        >>> result = converter.convert(istanbul, "EPSG:4326", "EPSG:3857")
        >>> result.value
        Coordinate(x=3225860.8..., y=5013551.0...)
        >>>
        >>> converter.convert(istanbul, "NOT:REAL", "EPSG:4326").kind
        <ErrorKind.UNKNOWN_CRS: 'unknown_crs'>
    """

    def __init__(
        self,
        registry: Optional[CRSRegistry] = None,
        engine: Optional[ProjectionEngine] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.engine = engine if engine is not None else PyprojEngine()
        self.resolver = AxisOrderResolver(self.registry)

    def convert(
        self, point: ExternalPoint, source_crs: str, target_crs: str
    ) -> TransformResult[Coordinate]:
        """
        Convert a single point from one CRS to another.

        When the source and target identifiers are equal the point is returned unchanged,
        without a registry lookup or engine call, so identity conversions are exact.

        Args:
            point: A Coordinate or an (x, y) pair in internal order, or a mapping keyed by
                the axis field names of the source CRS
            source_crs: The identifier of the CRS the point is in
            target_crs: The identifier of the CRS to convert into

        Returns:
            A success holding the converted Coordinate, or a failure with kind UNKNOWN_CRS
            (an identifier is not in the registry) or PROJECTION_FAILURE (the engine
            rejected the point) or MALFORMED_GEOMETRY (the point is not a finite numeric pair)
        """
        try:
            return TransformResult.success(
                self._convert_point(point, source_crs, target_crs)
            )
        except ProjectionError as e:
            return TransformResult.failure(e)

    def convert_all(
        self, points: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> TransformResult[List[Coordinate]]:
        """
        Convert a sequence of points from one CRS to another.

        The result has the same length and order as the input. The conversion is atomic:
        if any point fails, the whole batch fails and no partial list is returned.

        Args:
            points: The points to convert
            source_crs: The identifier of the CRS the points are in
            target_crs: The identifier of the CRS to convert into

        Returns:
            A success holding a new list of converted coordinates, or a single failure
        """
        try:
            return TransformResult.success(
                self._convert_points(points, source_crs, target_crs)
            )
        except ProjectionError as e:
            return TransformResult.failure(e)

    def transform(
        self, geometry: Geometry, source_crs: str, target_crs: str
    ) -> TransformResult[Geometry]:
        """
        Convert every coordinate of a geometry, keeping its structure intact.

        Args:
            geometry: Any geometry variant, including nested geometry collections
            source_crs: The identifier of the CRS the geometry is in
            target_crs: The identifier of the CRS to convert into

        Returns:
            A success holding a new geometry of the same kind, ring count, member count
            and per-ring coordinate count; or a failure if any coordinate failed
        """
        try:
            return TransformResult.success(
                self._transform_geometry(geometry, source_crs, target_crs)
            )
        except ProjectionError as e:
            return TransformResult.failure(e)

    def _transform_geometry(
        self, geometry: Geometry, source_crs: str, target_crs: str
    ) -> Geometry:
        return transform_geometry(
            geometry,
            functools.partial(
                self._convert_point, source_crs=source_crs, target_crs=target_crs
            ),
            functools.partial(
                self._convert_points, source_crs=source_crs, target_crs=target_crs
            ),
        )

    def _definitions(
        self, source_crs: str, target_crs: str
    ) -> Tuple[CRSDefinition, CRSDefinition]:
        source = self.registry.lookup(source_crs)
        target = self.registry.lookup(target_crs)

        if source is None and target is None:
            raise UnknownCRSError([source_crs, target_crs], "Source and target")
        elif source is None:
            raise UnknownCRSError(source_crs, "Source")
        elif target is None:
            raise UnknownCRSError(target_crs, "Target")

        return source, target

    def _as_coordinate(self, point: ExternalPoint, crs: str) -> Coordinate:
        if isinstance(point, Coordinate):
            return point
        return Coordinate(*self.resolver.to_internal(point, crs))

    def _convert_point(
        self, point: ExternalPoint, source_crs: str, target_crs: str
    ) -> Coordinate:
        if source_crs == target_crs:
            return self._as_coordinate(point, source_crs)

        source, target = self._definitions(source_crs, target_crs)
        x, y = self.resolver.to_internal(point, source_crs)

        try:
            new_x, new_y = self.engine.transform(
                source.definition, target.definition, x, y
            )
        except ProjectionFailureError as e:
            raise ProjectionFailureError(
                f"Failed to convert coordinate from {source_crs} to {target_crs}: {e.message}"
            ) from e

        return Coordinate(new_x, new_y)

    def _convert_points(
        self, points: Sequence[ExternalPoint], source_crs: str, target_crs: str
    ) -> List[Coordinate]:
        if source_crs == target_crs:
            return [self._as_coordinate(p, source_crs) for p in points]

        source, target = self._definitions(source_crs, target_crs)
        if len(points) == 0:
            return []

        xs, ys = zip(*(self.resolver.to_internal(p, source_crs) for p in points))

        try:
            new_xs, new_ys = self.engine.transform_many(
                source.definition, target.definition, xs, ys
            )
        except ProjectionFailureError as e:
            raise ProjectionFailureError(
                f"Failed to convert {len(points)} coordinates from {source_crs} to {target_crs}: {e.message}"
            ) from e

        if len(new_xs) != len(points) or len(new_ys) != len(points):
            raise ProjectionFailureError(
                f"engine returned {len(new_xs)} coordinates for {len(points)} inputs"
            )

        return [Coordinate(x, y) for x, y in zip(new_xs, new_ys)]
