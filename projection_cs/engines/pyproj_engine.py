from __future__ import annotations

import functools
import logging
import math
from typing import Sequence, Tuple

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from projection_cs.engines.engine_interface import ProjectionEngine
from projection_cs.utils.exceptions import ProjectionFailureError

log = logging.getLogger(__name__)

TRANSFORMER_CACHE_SIZE = 128


@functools.lru_cache(maxsize=TRANSFORMER_CACHE_SIZE)
def _build_transformer(source_definition: str, target_definition: str) -> Transformer:
    log.debug(f"building transformer {source_definition} -> {target_definition}")
    try:
        source_crs = CRS.from_user_input(source_definition)
        target_crs = CRS.from_user_input(target_definition)
    except CRSError as e:
        raise ProjectionFailureError(f"could not parse projection definition: {e}") from e

    # always_xy keeps (longitude, latitude) / (easting, northing) order regardless of
    # the axis order the authority declares for the CRS
    return Transformer.from_crs(source_crs, target_crs, always_xy=True)


class PyprojEngine(ProjectionEngine):
    """
    A projection engine backed by pyproj (PROJ).

    Transformers are built once per pair of definitions and reused.

    Examples:
        >>> engine = PyprojEngine()
        >>> engine.transform(
        ...     "+proj=longlat +datum=WGS84 +no_defs",
        ...     "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 +k=1 +units=m +nadgrids=@null +no_defs",
        ...     28.9784,
        ...     41.0082,
        ... )
        (3225860.8..., 5013551.0...)
    """

    def transform(
        self, source_definition: str, target_definition: str, x: float, y: float
    ) -> Tuple[float, float]:
        transformer = _build_transformer(source_definition, target_definition)
        try:
            new_x, new_y = transformer.transform(x, y, errcheck=True)
        except ProjError as e:
            raise ProjectionFailureError(f"unable to transform ({x}, {y}): {e}") from e

        if not (math.isfinite(new_x) and math.isfinite(new_y)):
            raise ProjectionFailureError(
                f"unable to transform ({x}, {y}): result ({new_x}, {new_y}) is not finite"
            )

        return new_x, new_y

    def transform_many(
        self,
        source_definition: str,
        target_definition: str,
        xs: Sequence[float],
        ys: Sequence[float],
    ) -> Tuple[Sequence[float], Sequence[float]]:
        transformer = _build_transformer(source_definition, target_definition)
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        try:
            new_xs, new_ys = transformer.transform(xs, ys, errcheck=True)
        except ProjError as e:
            raise ProjectionFailureError(
                f"unable to transform {len(xs)} coordinates: {e}"
            ) from e

        new_xs = np.asarray(new_xs, dtype=float)
        new_ys = np.asarray(new_ys, dtype=float)
        bad = np.flatnonzero(~(np.isfinite(new_xs) & np.isfinite(new_ys)))
        if len(bad) > 0:
            i = int(bad[0])
            raise ProjectionFailureError(
                f"unable to transform coordinate {i} ({xs[i]}, {ys[i]}): result is not finite"
            )

        return new_xs.tolist(), new_ys.tolist()
