"""
Command line entry point.

    leaf expand --axiom a --rule a=ab --cycles 3
    leaf voxels --preset tree --cycles 4 --angle 30
    leaf lines --preset cross --cycles 2
    leaf symbols
    leaf presets
"""

import argparse
import logging
import sys

from leaf_lsystem.config import PRESETS, LeafSettings, get_preset
from leaf_lsystem.errors import LeafError
from leaf_lsystem.rewriter import LSystem
from leaf_lsystem.symbols import usage_text

logger = logging.getLogger(__name__)


def _add_grammar_args(parser: argparse.ArgumentParser):
    parser.add_argument('--preset', choices=sorted(PRESETS), help='Use a named preset')
    parser.add_argument('--axiom', help='Starting symbols (overrides the preset)')
    parser.add_argument('--rule', action='append', dest='rules', help='Rule such as a=ab; repeatable')
    parser.add_argument('--cycles', type=int, default=3)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--max_length', type=int, default=1_000_000)


def _add_turtle_args(parser: argparse.ArgumentParser):
    parser.add_argument('--angle', type=float, default=None, help='Turn angle in degrees')
    parser.add_argument('--step_distance', type=float, default=1.0)
    parser.add_argument('--stack_capacity', type=int, default=500)
    parser.add_argument('--show', action='store_true', help='Print every emitted primitive')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='leaf', description='Design using L-Systems.')
    parser.add_argument('-v', '--verbose', action='store_true')
    sub = parser.add_subparsers(dest='command', required=True)

    _add_grammar_args(sub.add_parser('expand', help='Print the expanded string'))

    voxels = sub.add_parser('voxels', help='Run the voxel turtle')
    _add_grammar_args(voxels)
    _add_turtle_args(voxels)
    voxels.add_argument('--voxel_size', type=float, default=1.0)

    lines = sub.add_parser('lines', help='Run the line turtle')
    _add_grammar_args(lines)
    _add_turtle_args(lines)

    sub.add_parser('symbols', help='List recognised symbols and rule forms')
    sub.add_parser('presets', help='List named presets')
    return parser


def _grammar(args):
    preset = get_preset(args.preset) if args.preset else {}
    axiom = args.axiom if args.axiom is not None else preset.get('axiom', '')
    rules = list(preset.get('rules', [])) + list(args.rules or [])
    return axiom, rules, preset.get('angle', 90.0)


def _settings(args, preset_angle: float) -> LeafSettings:
    angle = getattr(args, 'angle', None)
    step_distance = getattr(args, 'step_distance', 1.0)
    # the line turtle uses its step distance as voxel size
    voxel_size = getattr(args, 'voxel_size', step_distance)
    return LeafSettings(
        voxel_size=voxel_size,
        angle=angle if angle is not None else preset_angle,
        step_distance=step_distance,
        stack_capacity=getattr(args, 'stack_capacity', 500),
        max_length=args.max_length,
        seed=args.seed,
    )


def run(args) -> int:
    if args.command == 'symbols':
        print(usage_text())
        return 0
    if args.command == 'presets':
        for name, preset in sorted(PRESETS.items()):
            print(f"{name:10s} {preset['axiom']:10s} {' '.join(preset['rules'])}  # {preset['description']}")
        return 0

    axiom, rules, preset_angle = _grammar(args)
    settings = _settings(args, preset_angle)
    lsys = LSystem(axiom, rules, seed=settings.seed, max_length=settings.max_length)
    code = lsys.generate(args.cycles)
    logger.info(f"Expanded {axiom!r} over {args.cycles} cycles to {len(code)} symbols")

    if args.command == 'expand':
        print(code)
        return 0

    if args.command == 'voxels':
        interpreter = settings.voxel_interpreter()
    else:
        interpreter = settings.line_interpreter()

    primitives = interpreter.interpret(code)
    if args.show:
        for p in primitives:
            print(p)
    print(f"{len(primitives)} {args.command}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        return run(args)
    except LeafError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
