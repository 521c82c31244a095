from unittest import TestCase

from projection_cs.constructs.coordinate import Coordinate
from projection_cs.constructs.geometry import (
    GeometryCollection,
    GeometryKind,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    close_ring,
    is_closed,
)
from projection_cs.utils.exceptions import MalformedGeometryError

SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]
HOLE = [(1, 1), (2, 1), (2, 2), (1, 1)]


class TestCoordinate(TestCase):
    def test_from_lat_lon_orders_longitude_first(self):
        c = Coordinate.from_lat_lon(41.0082, 28.9784)

        self.assertEqual(c.x, 28.9784)
        self.assertEqual(c.y, 41.0082)

    def test_from_easting_northing(self):
        c = Coordinate.from_easting_northing(414000, 4540000)

        self.assertEqual(c.xy, (414000.0, 4540000.0))


class TestGeometryVariants(TestCase):
    def test_kinds(self):
        self.assertEqual(Point((1, 2)).kind, GeometryKind.POINT)
        self.assertEqual(LineString([(0, 0), (1, 1)]).kind, GeometryKind.LINE_STRING)
        self.assertEqual(Polygon(SQUARE).kind, GeometryKind.POLYGON)
        self.assertEqual(MultiPoint().kind, GeometryKind.MULTI_POINT)
        self.assertEqual(MultiLineString().kind, GeometryKind.MULTI_LINE_STRING)
        self.assertEqual(MultiPolygon().kind, GeometryKind.MULTI_POLYGON)
        self.assertEqual(GeometryCollection().kind, GeometryKind.GEOMETRY_COLLECTION)

    def test_point_coerces_pairs(self):
        p = Point((1, 2))

        self.assertEqual(p.coordinate, Coordinate(1.0, 2.0))
        self.assertEqual((p.x, p.y), (1.0, 2.0))

    def test_point_rejects_non_finite(self):
        with self.assertRaises(MalformedGeometryError):
            Point((float("nan"), 1.0))
        with self.assertRaises(MalformedGeometryError):
            Point((float("inf"), 1.0))

    def test_point_rejects_non_numeric(self):
        for value in (("a", 1.0), "12", None, (1.0,)):
            with self.subTest(value=value):
                with self.assertRaises(MalformedGeometryError):
                    Point(value)

    def test_line_string_needs_two_coordinates(self):
        with self.assertRaises(MalformedGeometryError):
            LineString([(0, 0)])
        with self.assertRaises(MalformedGeometryError):
            LineString([])

    def test_polygon_keeps_rings(self):
        polygon = Polygon(SQUARE, [HOLE])

        self.assertEqual(len(polygon.exterior), 5)
        self.assertEqual(len(polygon.interiors), 1)
        self.assertEqual(len(polygon.rings), 2)

    def test_unclosed_triangle_is_rejected(self):
        with self.assertRaises(MalformedGeometryError):
            Polygon([(0, 0), (1, 0), (0, 1)])

    def test_unclosed_triangle_is_closed_by_from_coords(self):
        polygon = Polygon.from_coords([(0, 0), (1, 0), (0, 1)])

        self.assertEqual(len(polygon.exterior), 4)
        self.assertEqual(polygon.exterior[0], polygon.exterior[-1])

    def test_from_coords_without_closing_rejects_open_ring(self):
        with self.assertRaises(MalformedGeometryError):
            Polygon.from_coords([(0, 0), (1, 0), (0, 1)], close=False)

    def test_from_coords_closes_holes(self):
        polygon = Polygon.from_coords(SQUARE, [[(1, 1), (2, 1), (2, 2)]])

        self.assertTrue(is_closed(polygon.interiors[0]))

    def test_ring_needs_four_coordinates(self):
        with self.assertRaises(MalformedGeometryError):
            Polygon([(0, 0), (1, 0), (0, 0)])

    def test_open_interior_ring_is_rejected(self):
        with self.assertRaises(MalformedGeometryError):
            Polygon(SQUARE, [[(1, 1), (2, 1), (2, 2), (1, 2)]])

    def test_close_ring_leaves_closed_ring_alone(self):
        ring = close_ring(SQUARE)

        self.assertEqual(len(ring), len(SQUARE))

    def test_multi_polygon_rejects_other_members(self):
        with self.assertRaises(MalformedGeometryError):
            MultiPolygon((LineString([(0, 0), (1, 1)]),))

    def test_collection_rejects_non_geometries(self):
        with self.assertRaises(MalformedGeometryError):
            GeometryCollection(((1, 2),))

    def test_nested_collection(self):
        inner = GeometryCollection((Point((1, 1)),))
        outer = GeometryCollection((inner, LineString([(0, 0), (1, 1)])))

        self.assertEqual(len(outer), 2)
        self.assertIs(outer[0], inner)

    def test_geometries_are_immutable(self):
        p = Point((1, 2))

        with self.assertRaises(AttributeError):
            p.coordinate = Coordinate(3, 4)

    def test_to_wkt(self):
        self.assertEqual(Point((1, 2)).to_wkt(), "POINT (1 2)")
        self.assertEqual(
            LineString([(0, 0), (1.5, 2.25)]).to_wkt(), "LINESTRING (0 0, 1.5 2.25)"
        )
        self.assertTrue(Polygon(SQUARE, [HOLE]).to_wkt().startswith("POLYGON"))
        self.assertEqual(
            GeometryCollection((Point((1, 1)),)).to_wkt(),
            "GEOMETRYCOLLECTION (POINT (1 1))",
        )

    def test_to_wkt_rounding(self):
        self.assertEqual(Point((1.23456, 2.0)).to_wkt(rounding_precision=2), "POINT (1.23 2)")

    def test_to_shapely(self):
        polygon = Polygon(SQUARE, [HOLE]).to_shapely()

        self.assertEqual(polygon.geom_type, "Polygon")
        self.assertEqual(len(polygon.interiors), 1)
        self.assertAlmostEqual(polygon.area, 16.0 - 0.5)
