import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from leaf_lsystem.bindings import DUPLICATE_POLICIES, BindingTable
from leaf_lsystem.errors import InvalidInputError
from leaf_lsystem.interpreter import LineInterpreter, VoxelInterpreter
from leaf_lsystem.turtle import DEFAULT_STACK_CAPACITY

logger = logging.getLogger(__name__)


@dataclass
class LeafSettings:
    """Run settings shared by the rewriter and the turtles."""
    voxel_size: float = 1.0
    angle: float = 90.0
    step_distance: float = 1.0
    stack_capacity: int = DEFAULT_STACK_CAPACITY
    max_length: Optional[int] = None
    on_duplicate: str = "error"
    seed: Optional[int] = None

    def __post_init__(self):
        if self.voxel_size <= 0:
            raise InvalidInputError("voxel_size must be positive")
        if self.step_distance <= 0:
            raise InvalidInputError("step_distance must be positive")
        if self.stack_capacity < 1:
            raise InvalidInputError("stack_capacity must be at least 1")
        if self.max_length is not None and self.max_length < 0:
            raise InvalidInputError("max_length cannot be negative")
        if self.on_duplicate not in DUPLICATE_POLICIES:
            raise InvalidInputError(f"on_duplicate must be one of {DUPLICATE_POLICIES}")
        if self.step_distance != self.voxel_size:
            logger.debug("step_distance differs from voxel_size; voxels will overlap or leave gaps")

    def binding_table(self, entries: Iterable = ()) -> BindingTable:
        """Build bindings from ``(symbol, shape, anchors)`` entries with this duplicate policy."""
        return BindingTable.from_entries(entries, on_duplicate=self.on_duplicate)

    def voxel_interpreter(self, entries: Iterable = ()) -> VoxelInterpreter:
        return VoxelInterpreter(
            self.voxel_size, self.angle, self.step_distance,
            bindings=self.binding_table(entries),
            stack_capacity=self.stack_capacity,
        )

    def line_interpreter(self) -> LineInterpreter:
        return LineInterpreter(self.angle, self.step_distance, self.stack_capacity)


# Rules use the Leaf grammar: a=ab, a<b>c=d, a(.5)=b=c
PRESETS: Dict[str, Dict[str, Any]] = {
    "column": {
        "axiom": "a",
        "rules": ["a=aa"],
        "angle": 90,
        "description": "Straight stack of voxels"
    },
    "cross": {
        "axiom": "a",
        "rules": ["a=a[-a][+a][^a][/a]a"],
        "angle": 90,
        "description": "Branching in all four directions"
    },
    "stairs": {
        "axiom": "a",
        "rules": ["a=a^a/"],
        "angle": 90,
        "description": "Alternating pitch up and down"
    },
    "tree": {
        "axiom": "t",
        "rules": ["t=aa[-t][+t]", "a=aa"],
        "angle": 30,
        "description": "Binary tree with doubling trunk"
    },
    "dotted": {
        "axiom": "a",
        "rules": ["a=a_a"],
        "angle": 90,
        "description": "Gaps from moves without drawing"
    },
    "signal": {
        "axiom": "baaaaaaa",
        "rules": ["b<a=b", "b=a"],
        "angle": 90,
        "description": "Context rule passing a marker along the string"
    },
    "bush": {
        "axiom": "a",
        "rules": ["a(.6)=a[-a]a=a[+a]a"],
        "angle": 45,
        "description": "Stochastic bush, left or right branches"
    },
    "erosion": {
        "axiom": "aaaaaaaa",
        "rules": ["a(.8)=a"],
        "angle": 90,
        "description": "Voxels disappear with probability 0.2 per cycle"
    },
}


def get_preset(name: str) -> Dict[str, Any]:
    try:
        return PRESETS[name]
    except KeyError:
        raise InvalidInputError(f"Unknown preset {name!r}; choose from {sorted(PRESETS)}")
