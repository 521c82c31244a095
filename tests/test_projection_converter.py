from unittest import TestCase
from unittest.mock import Mock

from projection_cs.constructs.coordinate import Coordinate
from projection_cs.converters.projection_converter import ProjectionConverter
from projection_cs.engines.engine_interface import ProjectionEngine
from projection_cs.utils.crs import AxisOrder, CRSDefinition, CRSRegistry
from projection_cs.utils.exceptions import ErrorKind, ProjectionFailureError

ISTANBUL = Coordinate.from_lat_lon(41.0082, 28.9784)
ANKARA = Coordinate.from_lat_lon(39.9334, 32.8597)


class ShiftEngine(ProjectionEngine):
    """Adds 1000 to both axes and rejects points with x above a limit."""

    def __init__(self, limit: float = float("inf")):
        self.limit = limit
        self.calls = 0

    def transform(self, source_definition, target_definition, x, y):
        self.calls += 1
        if x > self.limit:
            raise ProjectionFailureError(f"x {x} out of range")
        return x + 1000.0, y + 1000.0


FAKE_REGISTRY = CRSRegistry(
    [
        CRSDefinition("A", "a", AxisOrder.GEOGRAPHIC),
        CRSDefinition("B", "b", AxisOrder.PROJECTED),
    ]
)


class TestProjectionConverter(TestCase):
    def setUp(self):
        self.converter = ProjectionConverter()

    def test_wgs84_to_web_mercator(self):
        result = self.converter.convert(ISTANBUL, "EPSG:4326", "EPSG:3857")

        self.assertTrue(result.is_success)
        self.assertGreater(abs(result.value.x), 1_000_000)
        self.assertGreater(abs(result.value.y), 1_000_000)
        self.assertAlmostEqual(result.value.x, 3225860.8, delta=1.0)

    def test_web_mercator_legacy_aliases_agree(self):
        a = self.converter.convert(ISTANBUL, "EPSG:4326", "EPSG:3857").value
        b = self.converter.convert(ISTANBUL, "EPSG4326", "WEB_MERCATOR").value

        self.assertAlmostEqual(a.x, b.x, places=6)
        self.assertAlmostEqual(a.y, b.y, places=6)

    def test_turkish_national_grid(self):
        result = self.converter.convert(ISTANBUL, "EPSG:4326", "ITRF96_3DEG_TM30")

        # west of the 30 degree central meridian, so below the 500 km false easting
        self.assertTrue(300_000 < result.value.x < 500_000)
        self.assertTrue(4_400_000 < result.value.y < 4_700_000)

    def test_round_trip(self):
        for target in ("EPSG:3857", "ITRF96_3DEG_TM30", "ITRF96_6DEG_ZONE35", "SR-ORG:7931"):
            with self.subTest(target=target):
                there = self.converter.convert(ISTANBUL, "EPSG:4326", target).value
                back = self.converter.convert(there, target, "EPSG:4326").value

                self.assertAlmostEqual(back.x, ISTANBUL.x, delta=1e-6)
                self.assertAlmostEqual(back.y, ISTANBUL.y, delta=1e-6)

    def test_identity_is_exact_and_skips_engine(self):
        engine = Mock(spec=ProjectionEngine)
        converter = ProjectionConverter(engine=engine)
        p = Coordinate(28.123456789012345, 41.98765432109876)

        result = converter.convert(p, "ITRF96_3DEG_TM30", "ITRF96_3DEG_TM30")

        self.assertIs(result.value, p)
        engine.transform.assert_not_called()

    def test_identity_does_not_consult_registry(self):
        result = self.converter.convert(ISTANBUL, "NOT:REAL", "NOT:REAL")

        self.assertIs(result.value, ISTANBUL)

    def test_unknown_source(self):
        result = self.converter.convert(ISTANBUL, "NOT:REAL", "EPSG:4326")

        self.assertTrue(result.is_failure)
        self.assertIsNone(result.value)
        self.assertEqual(result.kind, ErrorKind.UNKNOWN_CRS)
        self.assertIn("NOT:REAL", result.message)

    def test_unknown_target(self):
        result = self.converter.convert(ISTANBUL, "EPSG:4326", "EPSG:99999")

        self.assertEqual(result.kind, ErrorKind.UNKNOWN_CRS)
        self.assertIn("Target", result.message)

    def test_unknown_source_and_target_are_both_named(self):
        result = self.converter.convert(ISTANBUL, "FOO", "BAR")

        self.assertIn("FOO", result.message)
        self.assertIn("BAR", result.message)

    def test_unknown_crs_fails_before_engine(self):
        engine = Mock(spec=ProjectionEngine)
        converter = ProjectionConverter(engine=engine)

        converter.convert(ISTANBUL, "NOT:REAL", "EPSG:4326")

        engine.transform.assert_not_called()

    def test_engine_failure_is_reported(self):
        result = self.converter.convert(
            Coordinate(28.0, 95.0), "EPSG:4326", "EPSG:3857"
        )

        self.assertEqual(result.kind, ErrorKind.PROJECTION_FAILURE)
        self.assertIn("EPSG:4326", result.message)

    def test_mapping_input_uses_source_axis_fields(self):
        result = self.converter.convert(
            {"latitude": 41.0082, "longitude": 28.9784}, "EPSG:4326", "EPSG:3857"
        )
        expected = self.converter.convert(ISTANBUL, "EPSG:4326", "EPSG:3857")

        self.assertEqual(result.value, expected.value)

    def test_mapping_with_wrong_fields_fails(self):
        result = self.converter.convert(
            {"latitude": 41.0082, "longitude": 28.9784}, "EPSG:3857", "EPSG:4326"
        )

        self.assertEqual(result.kind, ErrorKind.MALFORMED_GEOMETRY)

    def test_pair_input_is_internal_order(self):
        result = self.converter.convert((28.9784, 41.0082), "EPSG:4326", "EPSG:3857")
        expected = self.converter.convert(ISTANBUL, "EPSG:4326", "EPSG:3857")

        self.assertEqual(result.value, expected.value)

    def test_pair_input_same_crs(self):
        result = self.converter.convert((28.9784, 41.0082), "EPSG:4326", "EPSG:4326")

        self.assertEqual(result.value, ISTANBUL)

    def test_non_numeric_field_fails(self):
        result = self.converter.convert(
            {"longitude": "abc", "latitude": 41.0}, "EPSG:4326", "EPSG:3857"
        )

        self.assertEqual(result.kind, ErrorKind.MALFORMED_GEOMETRY)

    def test_unusable_points_fail(self):
        for point in (None, 42, "28.9 41.0", (1.0,), (float("nan"), 41.0)):
            with self.subTest(point=point):
                result = self.converter.convert(point, "EPSG:4326", "EPSG:3857")

                self.assertEqual(result.kind, ErrorKind.MALFORMED_GEOMETRY)

    def test_injected_registry_and_engine(self):
        converter = ProjectionConverter(registry=FAKE_REGISTRY, engine=ShiftEngine())

        result = converter.convert(Coordinate(1.0, 2.0), "A", "B")

        self.assertEqual(result.value, Coordinate(1001.0, 1002.0))


class TestBatchConversion(TestCase):
    def setUp(self):
        self.converter = ProjectionConverter()

    def test_convert_all_preserves_order_and_length(self):
        result = self.converter.convert_all([ISTANBUL, ANKARA], "EPSG:4326", "EPSG:3857")

        self.assertEqual(len(result.value), 2)
        single = [
            self.converter.convert(p, "EPSG:4326", "EPSG:3857").value
            for p in (ISTANBUL, ANKARA)
        ]
        for a, b in zip(result.value, single):
            self.assertAlmostEqual(a.x, b.x, places=6)
            self.assertAlmostEqual(a.y, b.y, places=6)
        self.assertGreater(abs(result.value[0].y), 1_000_000)
        self.assertGreater(abs(result.value[1].y), 1_000_000)

    def test_convert_all_identity_returns_a_copy(self):
        points = [ISTANBUL, ANKARA]

        result = self.converter.convert_all(points, "EPSG:4326", "EPSG:4326")

        self.assertEqual(result.value, points)
        self.assertIsNot(result.value, points)

    def test_convert_all_empty(self):
        result = self.converter.convert_all([], "EPSG:4326", "EPSG:3857")

        self.assertEqual(result.value, [])

    def test_convert_all_unknown_crs(self):
        result = self.converter.convert_all([ISTANBUL], "EPSG:4326", "NOT:REAL")

        self.assertEqual(result.kind, ErrorKind.UNKNOWN_CRS)

    def test_convert_all_is_atomic(self):
        engine = ShiftEngine(limit=10.0)
        converter = ProjectionConverter(registry=FAKE_REGISTRY, engine=engine)
        points = [Coordinate(1.0, 1.0), Coordinate(20.0, 1.0), Coordinate(2.0, 1.0)]

        result = converter.convert_all(points, "A", "B")

        self.assertTrue(result.is_failure)
        self.assertIsNone(result.value)
        self.assertEqual(result.kind, ErrorKind.PROJECTION_FAILURE)
        # stops at the first failing point
        self.assertEqual(engine.calls, 2)

    def test_convert_all_pyproj_failure_is_atomic(self):
        points = [ISTANBUL, Coordinate(28.0, 95.0), ANKARA]

        result = self.converter.convert_all(points, "EPSG:4326", "EPSG:3857")

        self.assertTrue(result.is_failure)
        self.assertEqual(result.kind, ErrorKind.PROJECTION_FAILURE)

    def test_convert_all_with_a_malformed_point(self):
        points = [(28.9784, 41.0082), {"longitude": "abc", "latitude": 41.0}]

        result = self.converter.convert_all(points, "EPSG:4326", "EPSG:3857")

        self.assertEqual(result.kind, ErrorKind.MALFORMED_GEOMETRY)
