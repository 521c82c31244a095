from unittest import TestCase

from projection_cs.utils.crs import (
    DEFAULT_TARGET_CRS,
    AxisOrder,
    CRSDefinition,
    CRSRegistry,
    axis_order_of,
    default_registry,
)


class TestCRSRegistry(TestCase):
    def test_default_registry_contains_national_grids(self):
        registry = default_registry()

        for cm in (27, 30, 33, 36, 39, 42, 45):
            self.assertTrue(registry.is_known(f"ITRF96_3DEG_TM{cm}"))
            self.assertTrue(registry.is_known(f"ED50_3DEG_TM{cm}"))
        for zone in (35, 36, 37, 38):
            self.assertTrue(registry.is_known(f"ED50_6DEG_ZONE{zone}"))
            self.assertTrue(registry.is_known(f"ITRF96_6DEG_ZONE{zone}"))
        for code in range(7931, 7938):
            self.assertTrue(registry.is_known(f"SR-ORG:{code}"))

        self.assertEqual(len(registry), 34)

    def test_list_known_is_unique(self):
        known = default_registry().list_known()

        self.assertEqual(len(known), len(set(known)))
        self.assertIn("EPSG:4326", known)
        self.assertIn("WEB_MERCATOR", known)

    def test_default_registry_is_built_once(self):
        self.assertIs(default_registry(), default_registry())

    def test_lookup_returns_definition(self):
        definition = default_registry().lookup("SR-ORG:7932")

        self.assertEqual(definition.identifier, "SR-ORG:7932")
        self.assertIn("+lon_0=30", definition.definition)
        self.assertEqual(definition.axis_order, AxisOrder.PROJECTED)

    def test_lookup_unknown_returns_none(self):
        self.assertIsNone(default_registry().lookup("NOT:REAL"))
        self.assertFalse(default_registry().is_known("NOT:REAL"))

    def test_axis_order_comes_from_proj_database(self):
        registry = default_registry()

        geographic = [
            i
            for i in registry.list_known()
            if registry.lookup(i).axis_order == AxisOrder.GEOGRAPHIC
        ]

        self.assertEqual(sorted(geographic), ["EPSG4326", "EPSG:4326"])

    def test_default_target_is_geographic(self):
        self.assertEqual(
            default_registry().lookup(DEFAULT_TARGET_CRS).axis_order,
            AxisOrder.GEOGRAPHIC,
        )

    def test_extend_returns_new_registry(self):
        registry = default_registry()
        extended = registry.extend(
            {"TM24": "+proj=tmerc +lat_0=0 +lon_0=24 +k=1 +x_0=500000 +y_0=0 +ellps=GRS80 +units=m +no_defs"}
        )

        self.assertTrue(extended.is_known("TM24"))
        self.assertFalse(registry.is_known("TM24"))
        self.assertEqual(len(extended), len(registry) + 1)

    def test_duplicate_identifiers_are_rejected(self):
        with self.assertRaises(ValueError):
            default_registry().extend(
                {"EPSG:4326": "+proj=longlat +datum=WGS84 +no_defs"}
            )

    def test_explicit_definitions(self):
        registry = CRSRegistry(
            [CRSDefinition("LOCAL", "local grid", AxisOrder.PROJECTED)]
        )

        self.assertEqual(registry.list_known(), ["LOCAL"])
        self.assertEqual(registry.lookup("LOCAL").axis_order, AxisOrder.PROJECTED)

    def test_unparseable_definition_raises(self):
        with self.assertRaises(ValueError):
            axis_order_of("+proj=notaprojection")
