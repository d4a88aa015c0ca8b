"""
Symbol -> template geometry bindings for the voxel turtle.

A binding's three anchor points must lie on the front face of the
template's voxel, in order: bottom-left, top-left, bottom-right.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence

import numpy as np

from leaf_lsystem import geometry
from leaf_lsystem.errors import BindingError
from leaf_lsystem.symbols import RESERVED_SYMBOLS
from leaf_lsystem.turtle import TurtleState

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("error", "keep", "overwrite")


@dataclass(frozen=True, eq=False)
class GeometryBinding:
    symbol: str
    shape: geometry.Mesh
    anchors: Sequence

    def __post_init__(self):
        if not isinstance(self.symbol, str) or self.symbol == "":
            raise BindingError("You must choose a symbol to replace.")
        if len(self.symbol) > 1:
            raise BindingError(f"Bind one symbol at a time, got {self.symbol!r}")
        if self.symbol in RESERVED_SYMBOLS:
            raise BindingError(f"Cannot replace geometry for reserved symbol {self.symbol!r}")
        if not isinstance(self.shape, geometry.Mesh) or not self.shape.is_valid:
            raise BindingError(f"Invalid template shape for symbol {self.symbol!r}")
        if self.anchors is None or len(self.anchors) != 3:
            raise BindingError(f"Symbol {self.symbol!r} needs exactly 3 anchor points")

        anchors = tuple(geometry.as_point(p) for p in self.anchors)
        if not all(np.all(np.isfinite(p)) for p in anchors):
            raise BindingError(f"Anchor points of {self.symbol!r} must be finite")
        bl, tl, br = anchors
        if np.linalg.norm(np.cross(tl - bl, br - bl)) < geometry.EPS:
            raise BindingError(f"Anchor points of {self.symbol!r} are collinear")
        object.__setattr__(self, "anchors", anchors)

    @property
    def bl(self) -> np.ndarray:
        return self.anchors[0]

    @property
    def tl(self) -> np.ndarray:
        return self.anchors[1]

    @property
    def br(self) -> np.ndarray:
        return self.anchors[2]

    @property
    def voxel_size(self) -> float:
        return float(np.linalg.norm(self.tl - self.bl))

    @property
    def plane(self) -> geometry.Plane:
        return geometry.Plane(self.bl, self.tl, self.br)

    @property
    def center(self) -> np.ndarray:
        """Centre of the template voxel: face centre pushed half a voxel inwards."""
        a = geometry.unitize(self.tl - self.bl)
        b = geometry.unitize(self.br - self.bl)
        inward = geometry.unitize(np.cross(a, b)) * (-self.voxel_size / 2)
        face_center = (self.tl + self.br) / 2
        return face_center + inward

    def place(self, state: TurtleState) -> geometry.Mesh:
        """
        Copy the template onto the turtle's current face.

        The copy is scaled by ``state.voxel_size / self.voxel_size`` about the
        template centre, then aligned from the template plane to the turtle
        plane.
        """
        shape = self.shape.copy()
        source = self.plane

        factor = state.voxel_size / self.voxel_size
        if factor != 1:
            s = geometry.scale(self.center, factor)
            shape = shape.transform(s)
            source = source.transform(s)

        return shape.transform(geometry.plane_to_plane(source, state.plane))


class BindingTable:
    """
    Read-only lookup of bindings by symbol.

    Args:
        bindings: Valid GeometryBinding objects
        on_duplicate: "error" raises BindingError, "keep" keeps the first
            binding of a symbol, "overwrite" keeps the last one
    """

    def __init__(self, bindings: Iterable[GeometryBinding] = (), on_duplicate: str = "error"):
        if on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(f"on_duplicate must be one of {DUPLICATE_POLICIES}")
        self.on_duplicate = on_duplicate
        self._bindings: Dict[str, GeometryBinding] = {}
        for binding in bindings:
            self._add(binding)

    def _add(self, binding: GeometryBinding):
        if binding.symbol in self._bindings:
            if self.on_duplicate == "error":
                raise BindingError(f"Symbol {binding.symbol!r} is bound more than once")
            if self.on_duplicate == "keep":
                logger.warning(f"Ignoring duplicate binding for {binding.symbol!r}")
                return
            logger.warning(f"Overwriting binding for {binding.symbol!r}")
        self._bindings[binding.symbol] = binding

    @classmethod
    def from_entries(cls, entries: Iterable, on_duplicate: str = "error") -> "BindingTable":
        """
        Build a table from ``(symbol, shape, anchors)`` tuples.

        Invalid entries are logged and dropped; their symbols fall back to
        the default box.
        """
        bindings = []
        for entry in entries:
            if entry is None:
                continue
            try:
                bindings.append(GeometryBinding(*entry))
            except (BindingError, TypeError, ValueError) as e:
                logger.warning(f"Rejected geometry binding: {e}")
        return cls(bindings, on_duplicate=on_duplicate)

    def get(self, symbol: str) -> Optional[GeometryBinding]:
        return self._bindings.get(symbol)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._bindings

    def __iter__(self) -> Iterator[GeometryBinding]:
        return iter(self._bindings.values())

    def __len__(self) -> int:
        return len(self._bindings)
