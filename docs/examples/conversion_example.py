"""
# Conversion Example

An example of converting parcel geometries between Turkish projected coordinate systems and WGS84
"""


def main():
    """
    First, we build a converter.
    By default it knows the built-in Turkish CRS identifiers (3 degree TM zones, 6 degree UTM zones and the SR-ORG definitions)
    along with WGS84 and web mercator:
    """

    from projection_cs.converters.projection_converter import ProjectionConverter

    converter = ProjectionConverter()
    print(converter.registry.list_known())

    """
    Coordinates always carry x first and y second, so a geographic coordinate is (longitude, latitude).
    Use `Coordinate.from_lat_lon` to avoid mixing them up:
    """

    from projection_cs.constructs.coordinate import Coordinate

    istanbul = Coordinate.from_lat_lon(41.0082, 28.9784)

    result = converter.convert(istanbul, "EPSG:4326", "ITRF96_3DEG_TM30")

    """
    Conversions never raise for bad input, they return a `TransformResult`.
    Check `is_success` before using the value:
    """

    if result.is_success:
        print(result.value)
    else:
        print(result.kind, result.message)

    """
    Unknown identifiers come back as a failure too:
    """

    print(converter.convert(istanbul, "EPSG:4326", "NOT:REAL").message)

    """
    Now, let's parse a parcel boundary given in ITRF96 TM30 and convert it to WGS84.
    When no target is given the parser converts to EPSG:4326:
    """

    from projection_cs.parsers.wkt_parser import WKTParser, serialize

    parser = WKTParser(converter)

    parcel = parser.parse_as_polygon(
        "POLYGON((500000 4540000, 501000 4540000, 501000 4541000, 500000 4541000, 500000 4540000))",
        source_crs="ITRF96_3DEG_TM30",
    ).unwrap()

    print(serialize(parcel, rounding_precision=7))

    """
    WKT can also be built from coordinate lists. Polygon rings are closed for you:
    """

    from projection_cs.generators.wkt_generator import WKTGenerator

    generator = WKTGenerator(converter, rounding_precision=3)

    triangle = generator.create_polygon(
        [
            Coordinate.from_lat_lon(41.0082, 28.9784),
            Coordinate.from_lat_lon(39.9334, 32.8597),
            Coordinate.from_lat_lon(38.4237, 27.1428),
        ],
        "EPSG:4326",
        "EPSG:3857",
    )

    print(triangle.value)

    """
    Measurements run on the coordinates as given, so convert to a projected CRS first to get meters:
    """

    from projection_cs.engines.shapely_engine import ShapelyGeometryEngine

    engine = ShapelyGeometryEngine()

    projected = generator.convert_wkt(serialize(parcel), "EPSG:4326", "ITRF96_3DEG_TM30")
    print(engine.apply("area", projected.value).value)

    """
    Lastly, we can collect the geometries into a geodataframe for saving to file or plotting:
    """

    from projection_cs.utils.frames import geometries_to_geodataframe

    gdf = geometries_to_geodataframe([parcel], "EPSG:4326")
    gdf.head()


if __name__ == "__main__":
    main()
