"""Error types raised inside projection_cs.

Internal layers raise these; the public entry points catch them and return a
:class:`~projection_cs.constructs.result.TransformResult` instead.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    UNKNOWN_CRS = "unknown_crs"
    PROJECTION_FAILURE = "projection_failure"
    MALFORMED_GEOMETRY = "malformed_geometry"
    UNSUPPORTED_GEOMETRY_KIND = "unsupported_geometry_kind"
    NOTATION_PARSE_FAILURE = "notation_parse_failure"
    GEOMETRY_OPERATION_FAILURE = "geometry_operation_failure"


class ProjectionError(Exception):
    """Base class for every failure projection_cs reports."""

    kind: ErrorKind = ErrorKind.PROJECTION_FAILURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"


class UnknownCRSError(ProjectionError):
    kind = ErrorKind.UNKNOWN_CRS

    def __init__(self, identifiers, role: str = ""):
        if isinstance(identifiers, str):
            identifiers = [identifiers]
        self.identifiers = list(identifiers)
        names = ", ".join(f'"{i}"' for i in self.identifiers)
        prefix = f"{role} projection" if role else "projection"
        plural = "s" if len(self.identifiers) > 1 else ""
        super().__init__(f"{prefix}{plural} {names} not supported")


class ProjectionFailureError(ProjectionError):
    kind = ErrorKind.PROJECTION_FAILURE


class MalformedGeometryError(ProjectionError):
    kind = ErrorKind.MALFORMED_GEOMETRY


class UnsupportedGeometryKindError(ProjectionError):
    kind = ErrorKind.UNSUPPORTED_GEOMETRY_KIND

    def __init__(self, geometry_kind: str):
        self.geometry_kind = geometry_kind
        super().__init__(f"unsupported geometry kind: {geometry_kind}")


class NotationParseError(ProjectionError):
    kind = ErrorKind.NOTATION_PARSE_FAILURE


class GeometryOperationError(ProjectionError):
    kind = ErrorKind.GEOMETRY_OPERATION_FAILURE
