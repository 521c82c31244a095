from __future__ import annotations

from typing import Optional, Sequence

import geopandas as gpd
import pandas as pd

from projection_cs.constructs.geometry import Geometry
from projection_cs.utils.crs import CRSRegistry, default_registry
from projection_cs.utils.exceptions import UnknownCRSError


def geometries_to_geodataframe(
    geometries: Sequence[Geometry],
    crs_id: str,
    registry: Optional[CRSRegistry] = None,
) -> gpd.GeoDataFrame:
    """
    Convert geometry variants to a GeoDataFrame, one row per geometry.

    The CRS of the frame is the PROJ definition the registry holds for crs_id.

    Args:
        geometries: The geometries, all expressed in crs_id
        crs_id: The CRS identifier the geometries are expressed in
        registry: The registry to resolve crs_id against. Defaults to the built-in registry.

    Returns:
        A GeoDataFrame with columns:
        - kind: The geometry kind, e.g. 'Polygon'
        - geometry: The shapely geometry

    Raises:
        UnknownCRSError: If crs_id is not in the registry

    Examples:
        >>> result = WKTParser().parse("POLYGON((500000 4540000, 501000 4540000, 501000 4541000, 500000 4540000))")
        >>> gdf = geometries_to_geodataframe([result.value], "ITRF96_3DEG_TM30")
        >>> gdf.to_file("parcels.geojson", driver="GeoJSON")
    """
    registry = registry if registry is not None else default_registry()
    definition = registry.lookup(crs_id)
    if definition is None:
        raise UnknownCRSError(crs_id)

    df = pd.DataFrame(
        {
            "kind": [g.kind.value for g in geometries],
            "geometry": [g.to_shapely() for g in geometries],
        }
    )
    gdf = gpd.GeoDataFrame(df, geometry="geometry", crs=definition.definition)

    return gdf
