from projection_cs.constructs.coordinate import Coordinate
from projection_cs.constructs.geometry import (
    Geometry,
    GeometryCollection,
    GeometryKind,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from projection_cs.constructs.result import TransformResult
from projection_cs.converters.projection_converter import ProjectionConverter
from projection_cs.engines.pyproj_engine import PyprojEngine
from projection_cs.engines.shapely_engine import ShapelyGeometryEngine
from projection_cs.generators.wkt_generator import WKTGenerator
from projection_cs.parsers.wkt_parser import WKTParser, serialize
from projection_cs.utils.axis_order import AxisOrderResolver
from projection_cs.utils.crs import (
    DEFAULT_TARGET_CRS,
    LATLON_CRS,
    WEB_MERCATOR_CRS,
    AxisOrder,
    CRSDefinition,
    CRSRegistry,
    default_registry,
)
from projection_cs.utils.exceptions import ErrorKind, ProjectionError

__version__ = "0.1.0"
