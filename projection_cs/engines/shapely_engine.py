from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from projection_cs.constructs.result import TransformResult
from projection_cs.engines.engine_interface import GeometryEngine
from projection_cs.utils.exceptions import GeometryOperationError

log = logging.getLogger(__name__)

EngineValue = Union[str, float, bool, int]


def _read(text: str, name: str = "geometry") -> BaseGeometry:
    if not isinstance(text, str) or not text.strip():
        raise GeometryOperationError(f"{name} WKT is empty")
    try:
        return shapely_wkt.loads(text)
    except ShapelyError as e:
        raise GeometryOperationError(f"could not read {name} WKT: {e}") from e


def _param(params: Mapping[str, Any], key: str, operation_name: str) -> Any:
    if key not in params:
        raise GeometryOperationError(f"operation {operation_name} requires parameter '{key}'")
    return params[key]


def _write(geom: BaseGeometry) -> str:
    return shapely_wkt.dumps(geom, trim=True)


# operations on one geometry returning a new geometry
_UNARY: Dict[str, Callable[[BaseGeometry, Mapping[str, Any]], BaseGeometry]] = {
    "buffer": lambda g, p: g.buffer(float(_param(p, "distance", "buffer"))),
    "convex_hull": lambda g, p: g.convex_hull,
    "centroid": lambda g, p: g.centroid,
    "envelope": lambda g, p: g.envelope,
    "simplify": lambda g, p: g.simplify(
        float(_param(p, "tolerance", "simplify")), preserve_topology=True
    ),
}

# operations on two geometries returning a new geometry
_OVERLAY: Dict[str, Callable[[BaseGeometry, BaseGeometry], BaseGeometry]] = {
    "union": lambda a, b: a.union(b),
    "intersection": lambda a, b: a.intersection(b),
    "difference": lambda a, b: a.difference(b),
    "symmetric_difference": lambda a, b: a.symmetric_difference(b),
}

_PREDICATES: Dict[str, Callable[[BaseGeometry, BaseGeometry], bool]] = {
    "intersects": lambda a, b: a.intersects(b),
    "disjoint": lambda a, b: a.disjoint(b),
    "contains": lambda a, b: a.contains(b),
    "within": lambda a, b: a.within(b),
    "touches": lambda a, b: a.touches(b),
    "crosses": lambda a, b: a.crosses(b),
    "overlaps": lambda a, b: a.overlaps(b),
}

_MEASUREMENTS: Dict[str, Callable[[BaseGeometry], Union[float, int, str]]] = {
    "area": lambda g: float(g.area),
    "length": lambda g: float(g.length),
    "geometry_type": lambda g: g.geom_type,
    "num_points": lambda g: _num_points(g),
}


def _num_points(geom: BaseGeometry) -> int:
    if hasattr(geom, "geoms"):
        return sum(_num_points(g) for g in geom.geoms)
    if geom.geom_type == "Polygon":
        return len(geom.exterior.coords) + sum(len(r.coords) for r in geom.interiors)
    return len(geom.coords)


OPERATIONS = frozenset(
    [*_UNARY, *_OVERLAY, *_PREDICATES, *_MEASUREMENTS, "distance", "is_valid_wkt"]
)


class ShapelyGeometryEngine(GeometryEngine):
    """
    A geometry engine backed by shapely (GEOS).

    Operations run on whatever coordinates the WKT holds; measurements are in the units
    of those coordinates, so convert to a projected CRS first for meters.

    Supported operations:
        - buffer (distance), convex_hull, centroid, envelope, simplify (tolerance)
        - union, intersection, difference, symmetric_difference (other)
        - intersects, disjoint, contains, within, touches, crosses, overlaps (other)
        - area, length, distance (other), geometry_type, num_points, is_valid_wkt

    Examples:
        >>> engine = ShapelyGeometryEngine()
        >>> engine.apply("buffer", "POINT (0 0)", {"distance": 10}).value
        'POLYGON ((10 0, ...))'
        >>> engine.apply("contains", "POLYGON ((0 0, 4 0, 4 4, 0 4, 0 0))", {"other": "POINT (1 1)"}).value
        True
    """

    def apply(
        self,
        operation_name: str,
        notation_text: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> TransformResult[EngineValue]:
        params = params if params is not None else {}
        try:
            return TransformResult.success(
                self._apply(operation_name, notation_text, params)
            )
        except GeometryOperationError as e:
            return TransformResult.failure(e)

    def _apply(
        self, operation_name: str, notation_text: str, params: Mapping[str, Any]
    ) -> EngineValue:
        if operation_name not in OPERATIONS:
            raise GeometryOperationError(f"unknown geometry operation {operation_name}")

        if operation_name == "is_valid_wkt":
            try:
                _read(notation_text)
            except GeometryOperationError:
                return False
            return True

        geom = _read(notation_text)
        try:
            if operation_name in _UNARY:
                return _write(_UNARY[operation_name](geom, params))
            elif operation_name in _MEASUREMENTS:
                return _MEASUREMENTS[operation_name](geom)

            other = _read(_param(params, "other", operation_name), "other")
            if operation_name in _OVERLAY:
                return _write(_OVERLAY[operation_name](geom, other))
            elif operation_name in _PREDICATES:
                return bool(_PREDICATES[operation_name](geom, other))
            else:
                return float(geom.distance(other))
        except (ShapelyError, ValueError, TypeError) as e:
            raise GeometryOperationError(f"{operation_name} operation failed: {e}") from e
