"""
Turtle state for the 3D interpreter.

The turtle's orientation is a face of the current voxel, given by three
points: bottom-left (bl), top-left (tl) and bottom-right (br). The forward
direction is the normal of that face; turning rotates about the bl->tl edge
and pitching about the bl->br edge, both through the turtle's centre point.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from leaf_lsystem import geometry
from leaf_lsystem.errors import InvalidInputError, StackOverflowError

DEFAULT_STACK_CAPACITY = 500


def _frozen(p) -> np.ndarray:
    arr = geometry.as_point(p).copy()
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class TurtleState:
    """Immutable snapshot of the turtle. Every move returns a new state."""
    point: np.ndarray
    bl: np.ndarray
    tl: np.ndarray
    br: np.ndarray
    voxel_size: float = 1.0
    step_distance: float = 1.0
    angle: float = 90.0

    def __post_init__(self):
        for name in ("point", "bl", "tl", "br"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @classmethod
    def initial(
        cls,
        voxel_size: float = 1.0,
        step_distance: float = 1.0,
        angle: float = 90.0,
        origin: Tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> "TurtleState":
        if voxel_size <= 0:
            raise InvalidInputError(f"voxel_size must be positive, got {voxel_size}")
        if step_distance <= 0:
            raise InvalidInputError(f"step_distance must be positive, got {step_distance}")
        x, y, z = origin
        h = voxel_size / 2
        return cls(
            point=(x, y, z),
            bl=(x - h, y + h, z - h),
            tl=(x - h, y + h, z + h),
            br=(x + h, y + h, z - h),
            voxel_size=voxel_size,
            step_distance=step_distance,
            angle=angle,
        )

    @property
    def forward(self) -> np.ndarray:
        a = geometry.unitize(self.tl - self.bl)
        b = geometry.unitize(self.br - self.bl)
        return geometry.unitize(np.cross(a, b))

    @property
    def plane(self) -> geometry.Plane:
        return geometry.Plane(self.bl, self.tl, self.br)

    def transformed(self, matrix: np.ndarray) -> "TurtleState":
        pts = geometry.apply(matrix, np.array([self.point, self.bl, self.tl, self.br]))
        return replace(self, point=pts[0], bl=pts[1], tl=pts[2], br=pts[3])

    def moved(self) -> "TurtleState":
        return self.transformed(geometry.translation(self.forward * self.step_distance))

    def _rotated(self, axis: np.ndarray, degrees: float) -> "TurtleState":
        return self.transformed(geometry.rotation(math.radians(degrees), axis, self.point))

    def turned_left(self) -> "TurtleState":
        return self._rotated(self.tl - self.bl, self.angle)

    def turned_right(self) -> "TurtleState":
        return self._rotated(self.tl - self.bl, -self.angle)

    def pitched_up(self) -> "TurtleState":
        return self._rotated(self.br - self.bl, self.angle)

    def pitched_down(self) -> "TurtleState":
        return self._rotated(self.br - self.bl, -self.angle)

    def curve_ends(self) -> Tuple[np.ndarray, np.ndarray]:
        """Segment ending at the turtle's point, one step behind it."""
        return self.point - self.forward * self.step_distance, self.point.copy()

    def __repr__(self) -> str:
        return f"TurtleState(point={self.point.tolist()}, forward={self.forward.round(6).tolist()})"


class Turtle:
    """Mutable handle on the current TurtleState."""

    def __init__(self, state: Optional[TurtleState] = None):
        self.state = state if state is not None else TurtleState.initial()

    @classmethod
    def create(cls, voxel_size: float = 1.0, step_distance: float = 1.0, angle: float = 90.0) -> "Turtle":
        return cls(TurtleState.initial(voxel_size, step_distance, angle))

    @property
    def point(self) -> np.ndarray:
        return self.state.point

    @property
    def voxel_size(self) -> float:
        return self.state.voxel_size

    @property
    def plane(self) -> geometry.Plane:
        return self.state.plane

    def move(self):
        self.state = self.state.moved()

    def turn_left(self):
        self.state = self.state.turned_left()

    def turn_right(self):
        self.state = self.state.turned_right()

    def pitch_up(self):
        self.state = self.state.pitched_up()

    def pitch_down(self):
        self.state = self.state.pitched_down()

    def save(self) -> TurtleState:
        return self.state

    def restore(self, state: TurtleState):
        self.state = state


class TurtleStack:
    """Bounded stack of saved turtle states."""

    def __init__(self, capacity: int = DEFAULT_STACK_CAPACITY):
        if capacity < 1:
            raise ValueError("Stack capacity must be at least 1")
        self.capacity = capacity
        self._items: List[TurtleState] = []

    def push(self, state: TurtleState):
        if len(self._items) >= self.capacity:
            raise StackOverflowError(f"Stack overflow! More than {self.capacity} nested branches")
        self._items.append(state)

    def pop(self) -> Optional[TurtleState]:
        """Return the last saved state, or None if nothing is saved."""
        if not self._items:
            return None
        return self._items.pop()

    def __len__(self) -> int:
        return len(self._items)
