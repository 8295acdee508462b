"""
Layout Table
============
Static mapping from document field to the anchors where it is printed
on the template, plus the anchors of the signature stamp.

Anchors are given in template pixel space for the 1000x1200 template.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, NamedTuple, Tuple, Union


class FieldName(str, Enum):
    """Text fields printed on the document"""
    NAME = "name"
    ADDRESS = "address"
    ISSUER = "issuer"
    NUMBER = "number"
    YEAR = "year"
    TIME = "time"


class Anchor(NamedTuple):
    """Nominal top-left origin of a field occurrence or overlay."""
    x: float
    y: float

    def shifted(self, dx: float, dy: float) -> "Anchor":
        return Anchor(self.x + dx, self.y + dy)


# =============================================================================
# Default Layout
# =============================================================================

DEFAULT_FIELD_ANCHORS: Dict[FieldName, Tuple[Anchor, ...]] = {
    FieldName.NAME: (
        Anchor(255.0, 22.0),
        Anchor(365.0, 975.0),
    ),
    FieldName.ADDRESS: (
        Anchor(305.0, 70.0),
    ),
    # header, body and footer roles of the issuer
    FieldName.ISSUER: (
        Anchor(305.0, 250.0),
        Anchor(145.0, 730.0),
        Anchor(265.0, 1020.0),
    ),
    FieldName.NUMBER: (
        Anchor(560.0, 135.0),
        Anchor(448.0, 350.0),
    ),
    FieldName.YEAR: (
        Anchor(367.0, 352.0),
        Anchor(676.0, 453.0),
        Anchor(392.0, 843.0),
        Anchor(483.0, 1096.0),
        Anchor(836.0, 1096.0),
    ),
    FieldName.TIME: (
        Anchor(753.0, 457.0),
    ),
}

DEFAULT_SIGNATURE_ANCHORS: Tuple[Anchor, ...] = (
    Anchor(700.0, 990.0),
)


class LayoutTable:
    """
    Read-only field -> anchors lookup.

    Lookup is total: fields without anchors (or unknown names) resolve to an
    empty tuple so optional fields become no-ops instead of errors.
    """

    def __init__(
        self,
        field_anchors: Mapping[FieldName, Iterable[Tuple[float, float]]],
        signature_anchors: Iterable[Tuple[float, float]] = (),
    ):
        anchors = {}
        for field_name, positions in field_anchors.items():
            field_name = FieldName(field_name)
            resolved = tuple(Anchor(float(x), float(y)) for x, y in positions)
            if not resolved:
                raise ValueError(f"Field '{field_name.value}' needs at least one anchor")
            anchors[field_name] = resolved

        self._anchors = MappingProxyType(anchors)
        self._signature = tuple(Anchor(float(x), float(y)) for x, y in signature_anchors)

    def anchors(self, field_name: Union[FieldName, str]) -> Tuple[Anchor, ...]:
        """Anchors for a field in print order; empty for unknown fields."""
        try:
            key = FieldName(field_name)
        except ValueError:
            return ()
        return self._anchors.get(key, ())

    @property
    def signature_anchors(self) -> Tuple[Anchor, ...]:
        return self._signature

    @property
    def fields(self) -> Tuple[FieldName, ...]:
        """Configured fields in rendering order."""
        return tuple(f for f in FieldName if f in self._anchors)


DEFAULT_LAYOUT = LayoutTable(DEFAULT_FIELD_ANCHORS, DEFAULT_SIGNATURE_ANCHORS)
