"""Command-line front end for the preset catalogue.

Run:
  lsystem-rewriter list
  lsystem-rewriter expand koch --depth 2
  lsystem-rewriter render dragon dragon.svg --depth 12
  lsystem-rewriter validate plant
  lsystem-rewriter --help
"""

from __future__ import annotations

import argparse
import logging
import sys

from .engine import Fractal
from .errors import ConfigError, RewriteError, _require
from .presets import PRESETS, Preset, get_preset
from .svg import SvgOptions, SvgStyle, write_svg

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 12
DEFAULT_MAX_LETTERS = 2_000_000
_VALIDATE_GENERATIONS = 3

HELP_EPILOG = r"""
PRESETS

  Every preset is a text L-system: an axiom, production rules keyed by one or
  more letters, and a turtle command table. Rules are applied by splitting
  the word into the longest matching patterns, left to right, and replacing
  each pattern by its rule (letters without a rule are copied).

  Use `list` to see the catalogue.

LIMITS

  Words grow multiplicatively with depth. --max-depth rejects deep requests
  up front; --max-letters stops once a generation grows past the limit.

EXAMPLES

  lsystem-rewriter expand koch --depth 1
      F+F--F+F

  lsystem-rewriter render hilbert hilbert.svg --depth 6 --step 5
"""


def _positive_float(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return value


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lsystem-rewriter",
        description="L-system rewriting engine with SVG rendering of built-in fractals.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v info, -vv debug).",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Largest generation depth accepted (default {DEFAULT_MAX_DEPTH}).",
    )
    p.add_argument(
        "--max-letters",
        type=int,
        default=DEFAULT_MAX_LETTERS,
        help=f"Largest word length accepted (default {DEFAULT_MAX_LETTERS}).",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List the built-in presets.")

    pe = sub.add_parser("expand", help="Print the word at a generation depth.")
    pe.add_argument("preset", help="Preset name.")
    pe.add_argument("--depth", type=int, default=None, help="Generation depth.")

    pr = sub.add_parser(
        "render",
        help="Render a preset to an SVG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pr.add_argument("preset", help="Preset name.")
    pr.add_argument("output", help="Path to write the SVG output.")
    pr.add_argument("--depth", type=int, default=None, help="Generation depth.")
    pr.add_argument("--step", type=_positive_float, default=10.0, help="Forward step length.")
    pr.add_argument("--margin", type=float, default=10.0, help="Margin around the drawing.")
    pr.add_argument("--precision", type=int, default=3, help="Coordinate precision (0..10).")
    pr.add_argument("--no-flip-y", action="store_true", help="Keep SVG's downward Y axis.")
    pr.add_argument("--width", type=_positive_float, default=None, help="SVG width attribute.")
    pr.add_argument("--height", type=_positive_float, default=None, help="SVG height attribute.")
    pr.add_argument("--stroke", default="#000", help="Stroke colour.")
    pr.add_argument("--stroke-width", type=float, default=1.0, help="Stroke width.")
    pr.add_argument("--background", default=None, help="Background colour.")

    pv = sub.add_parser(
        "validate", help="Validate a preset's grammar and print a brief summary."
    )
    pv.add_argument("preset", help="Preset name.")

    return p


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
    )


def _generate(
    preset: Preset, depth: int | None, max_depth: int, max_letters: int
) -> tuple[Fractal, int]:
    depth = preset.default_depth if depth is None else depth
    _require(depth >= 0, "depth must be >= 0")
    fractal = preset.build(max_depth=max_depth)
    while fractal.computed_depth < depth:
        word = fractal.advance()
        logger.info(
            "%s: generation %d has %d letters",
            preset.name,
            fractal.computed_depth,
            len(word),
        )
        _require(
            len(word) <= max_letters,
            f"generation {fractal.computed_depth} has {len(word)} letters, "
            f"more than --max-letters {max_letters}",
        )
    return fractal, depth


# -------------------------
# Commands
# -------------------------


def cmd_list() -> None:
    width = max(len(name) for name in PRESETS)
    for name in sorted(PRESETS):
        p = PRESETS[name]
        print(f"{name:<{width}}  {p.description} (axiom {p.axiom!r}, angle {p.angle_deg:g})")


def cmd_expand(name: str, depth: int | None, max_depth: int, max_letters: int) -> None:
    preset = get_preset(name)
    fractal, depth = _generate(preset, depth, max_depth, max_letters)
    word = fractal.generation_at(depth)
    print(word)
    print(f"length: {len(word)}", file=sys.stderr)
    counts = " ".join(
        f"{letter}={word.count(letter)}" for letter in sorted(map(str, word.alphabet()))
    )
    print(f"letters: {counts}", file=sys.stderr)


def cmd_render(args: argparse.Namespace) -> None:
    preset = get_preset(args.preset)
    options = SvgOptions(
        margin=args.margin,
        precision=args.precision,
        flip_y=not args.no_flip_y,
        width=args.width,
        height=args.height,
        style=SvgStyle(stroke=args.stroke, stroke_width=args.stroke_width),
        background=args.background,
    )
    fractal, depth = _generate(preset, args.depth, args.max_depth, args.max_letters)

    turtle = preset.turtle(step=args.step)
    invoked = fractal.apply_semantics(turtle, depth)
    polylines = turtle.polylines()
    logger.info("%s: %d actions, %d polylines", preset.name, invoked, len(polylines))

    write_svg(
        polylines,
        args.output,
        options,
        title=f"{preset.description} (depth {depth})",
    )


def cmd_validate(name: str, max_depth: int, max_letters: int) -> None:
    preset = get_preset(name)
    grammar = preset.grammar()

    print(f"name: {preset.name}")
    print(f"axiom: {preset.axiom}")
    print(f"terminals: {len(grammar.terminals)}")
    print(f"non-terminals: {len(grammar.non_terminals)}")
    print(f"rules: {len(grammar.rules)}")
    for rule in grammar.rules:
        print(f"  {rule}")

    # Expand a few generations so segmentation gaps surface here rather than
    # at render time.
    depth = min(_VALIDATE_GENERATIONS, max_depth)
    fractal, _ = _generate(preset, depth, max_depth, max_letters)
    growth = " ".join(str(len(w)) for w in fractal.generations(depth))
    print(f"growth: {growth}")

    turtle = preset.turtle()
    fractal.apply_semantics(turtle, depth)
    if not turtle.polylines():
        raise ConfigError("Preset produces no drawable geometry")


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.cmd == "list":
            cmd_list()
        elif args.cmd == "expand":
            cmd_expand(args.preset, args.depth, args.max_depth, args.max_letters)
        elif args.cmd == "render":
            cmd_render(args)
        elif args.cmd == "validate":
            cmd_validate(args.preset, args.max_depth, args.max_letters)
        else:
            raise AssertionError("unreachable")
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except RewriteError as e:
        print(f"Rewrite error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
