from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from projection_cs.constructs.result import TransformResult


class ProjectionEngine(metaclass=ABCMeta):
    """
    Abstract base class for the numeric CRS transformation backend.

    An engine only sees PROJ definition strings and internal (x, y) values. It knows
    nothing about CRS identifiers, axis order conventions or geometry structure.

    Examples:
        >>> from projection_cs.engines.pyproj_engine import PyprojEngine
        >>> engine = PyprojEngine()
        >>> x, y = engine.transform(wgs84_definition, web_mercator_definition, 28.9784, 41.0082)
    """

    @abstractmethod
    def transform(
        self, source_definition: str, target_definition: str, x: float, y: float
    ) -> Tuple[float, float]:
        """
        Transform one (x, y) pair between two CRS definitions.

        Args:
            source_definition: The PROJ definition of the CRS the pair is in
            target_definition: The PROJ definition of the CRS to transform into
            x: The first axis value (longitude or easting)
            y: The second axis value (latitude or northing)

        Returns:
            The transformed (x, y) pair

        Raises:
            ProjectionFailureError: If the engine rejects the input or the result is not finite
        """

    def transform_many(
        self,
        source_definition: str,
        target_definition: str,
        xs: Sequence[float],
        ys: Sequence[float],
    ) -> Tuple[Sequence[float], Sequence[float]]:
        """
        Transform many (x, y) pairs between two CRS definitions.

        Engines that can transform arrays in one call should override this; the default
        transforms one pair at a time and stops at the first failure.
        """
        out_x, out_y = [], []
        for x, y in zip(xs, ys):
            tx, ty = self.transform(source_definition, target_definition, x, y)
            out_x.append(tx)
            out_y.append(ty)

        return out_x, out_y


class GeometryEngine(metaclass=ABCMeta):
    """
    Abstract base class for geometric algorithms that run on WKT text.

    Used for operations on already-transformed geometry such as buffering, overlays,
    predicates and measurements.
    """

    @abstractmethod
    def apply(
        self,
        operation_name: str,
        notation_text: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> TransformResult[Union[str, float, bool, int]]:
        """
        Run a named geometric operation.

        Args:
            operation_name: The operation to run, e.g. 'buffer' or 'intersects'
            notation_text: The WKT of the geometry to operate on
            params: Operation parameters, e.g. {'distance': 10.0} or {'other': 'POINT (1 1)'}

        Returns:
            A success holding WKT text for geometry results, a bool for predicates or a
            number for measurements; or a failure describing why the operation failed
        """
