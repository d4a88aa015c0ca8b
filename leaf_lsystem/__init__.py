"""Leaf: design using L-Systems and a 3D voxel turtle."""

from leaf_lsystem.bindings import BindingTable, GeometryBinding
from leaf_lsystem.config import PRESETS, LeafSettings, get_preset
from leaf_lsystem.errors import (
    BindingError,
    ExpansionLimitError,
    InvalidInputError,
    LeafError,
    RuleSyntaxError,
    StackOverflowError,
)
from leaf_lsystem.geometry import Box, Line, Mesh, Plane
from leaf_lsystem.interpreter import LineInterpreter, VoxelInterpreter, interpret, interpret_lines
from leaf_lsystem.rewriter import LSystem, expand, iter_generations
from leaf_lsystem.rules import RuleKind, RuleSet, compile_rules, parse_rule
from leaf_lsystem.turtle import Turtle, TurtleStack, TurtleState

__version__ = "1.1.0"
