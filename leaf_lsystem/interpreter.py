"""
Turtle interpreters: walk a symbol string and emit geometry.

Commands:
    ^ : pitch up
    / : pitch down
    - : turn left
    + : turn right
    _ : move forward without drawing
    [ : save state
    ] : restore state (ignored when nothing is saved)
    anything else: move forward, then draw
"""

import logging
from typing import Callable, List, Optional, Union

from leaf_lsystem import geometry, symbols
from leaf_lsystem.bindings import BindingTable
from leaf_lsystem.turtle import DEFAULT_STACK_CAPACITY, Turtle, TurtleStack

logger = logging.getLogger(__name__)

Primitive = Union[geometry.Box, geometry.Mesh, geometry.Line]

_MOVES = {
    symbols.PITCH_UP: Turtle.pitch_up,
    symbols.PITCH_DOWN: Turtle.pitch_down,
    symbols.TURN_LEFT: Turtle.turn_left,
    symbols.TURN_RIGHT: Turtle.turn_right,
    symbols.MOVE: Turtle.move,
}


def walk(
    code: str,
    turtle: Turtle,
    emit: Callable[[str, Turtle], Primitive],
    stack_capacity: int = DEFAULT_STACK_CAPACITY,
) -> List[Primitive]:
    """
    Drive ``turtle`` through ``code`` and collect what ``emit`` returns
    for every drawable symbol.

    ``turtle`` only takes the final state once the whole string has been
    walked.

    Raises:
        StackOverflowError: more than ``stack_capacity`` nested branches.
            Nothing is returned and ``turtle`` is left untouched.
    """
    live = Turtle(turtle.state)
    stack = TurtleStack(stack_capacity)
    out: List[Primitive] = []

    for c in code:
        move = _MOVES.get(c)
        if move is not None:
            move(live)
        elif c == symbols.PUSH:
            stack.push(live.save())
        elif c == symbols.POP:
            state = stack.pop()
            if state is None:
                logger.debug("Unmatched ']' ignored")
            else:
                live.restore(state)
        else:
            if c in symbols.RULE_ONLY_SYMBOLS:
                logger.debug(f"Rule-only symbol {c!r} drawn as a voxel")
            live.move()
            out.append(emit(c, live))

    turtle.restore(live.state)
    return out


def create_block(turtle: Turtle) -> geometry.Box:
    state = turtle.state
    plane = geometry.Plane(state.tl, state.bl, state.br)
    return geometry.Box(plane, state.voxel_size)


def create_line(turtle: Turtle) -> geometry.Line:
    return geometry.Line(*turtle.state.curve_ends())


class VoxelInterpreter:
    """
    Voxel turtle: every drawable symbol becomes a box, or a copy of the
    geometry bound to it.

    Args:
        voxel_size: Standard voxel size
        angle: Turn angle in degrees
        step_distance: Distance to move for each voxel; usually equal to voxel_size
        bindings: Optional BindingTable
        stack_capacity: Maximum branch nesting
    """

    def __init__(
        self,
        voxel_size: float = 1.0,
        angle: float = 90.0,
        step_distance: float = 1.0,
        bindings: Optional[BindingTable] = None,
        stack_capacity: int = DEFAULT_STACK_CAPACITY,
    ):
        self.voxel_size = voxel_size
        self.angle = angle
        self.step_distance = step_distance
        self.bindings = bindings if bindings is not None else BindingTable()
        self.stack_capacity = stack_capacity

    def new_turtle(self) -> Turtle:
        return Turtle.create(self.voxel_size, self.step_distance, self.angle)

    def _emit(self, symbol: str, turtle: Turtle) -> Primitive:
        binding = self.bindings.get(symbol)
        if binding is not None:
            return binding.place(turtle.state)
        return create_block(turtle)

    def interpret(self, code: str, turtle: Optional[Turtle] = None) -> List[Primitive]:
        turtle = turtle if turtle is not None else self.new_turtle()
        shapes = walk(code, turtle, self._emit, self.stack_capacity)
        logger.info(f"Voxel turtle emitted {len(shapes)} shapes")
        return shapes


class LineInterpreter:
    """Line turtle: step distance is both segment length and spacing."""

    def __init__(
        self,
        angle: float = 90.0,
        step_distance: float = 1.0,
        stack_capacity: int = DEFAULT_STACK_CAPACITY,
    ):
        self.angle = angle
        self.step_distance = step_distance
        self.stack_capacity = stack_capacity

    def new_turtle(self) -> Turtle:
        return Turtle.create(self.step_distance, self.step_distance, self.angle)

    def interpret(self, code: str, turtle: Optional[Turtle] = None) -> List[geometry.Line]:
        turtle = turtle if turtle is not None else self.new_turtle()
        lines = walk(code, turtle, lambda c, t: create_line(t), self.stack_capacity)
        logger.info(f"Line turtle emitted {len(lines)} lines")
        return lines


def interpret(
    code: str,
    turtle: Turtle,
    bindings: Optional[BindingTable] = None,
    stack_capacity: int = DEFAULT_STACK_CAPACITY,
) -> List[Primitive]:
    """Run the voxel turtle with an existing Turtle."""
    interpreter = VoxelInterpreter(
        voxel_size=turtle.voxel_size,
        angle=turtle.state.angle,
        step_distance=turtle.state.step_distance,
        bindings=bindings,
        stack_capacity=stack_capacity,
    )
    return interpreter.interpret(code, turtle)


def interpret_lines(
    code: str,
    turtle: Turtle,
    stack_capacity: int = DEFAULT_STACK_CAPACITY,
) -> List[geometry.Line]:
    """Run the line turtle with an existing Turtle."""
    interpreter = LineInterpreter(turtle.state.angle, turtle.state.step_distance, stack_capacity)
    return interpreter.interpret(code, turtle)
