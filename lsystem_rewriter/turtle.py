"""Turtle payload and command-table actions.

A :class:`Turtle` is the payload threaded through a semantics pass. The
command table maps a text pattern to an action object, the same shape the
CLI presets use:

  - {"type":"forward", "draw": true|false, "step": <optional multiplier>}
  - {"type":"turn", "direction": +1|-1, "angle": <optional multiplier>}
  - {"type":"turn_abs", "angle": <degrees>}
  - {"type":"push"}
  - {"type":"pop"}
  - {"type":"noop"}
  - a list of the above, run in order
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, cast

from .dictionary import Action, Dictionary
from .errors import ConfigError, _require
from .word import Word

Point = tuple[float, float]


def _as_float(x: Any, path: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool), f"{path} must be a number"
    )
    return float(x)


def _as_bool(x: Any, path: str) -> bool:
    _require(isinstance(x, bool), f"{path} must be a boolean")
    return cast(bool, x)


@dataclass(frozen=True)
class TurtleState:
    x: float
    y: float
    heading_deg: float


@dataclass
class PolylineBuffer:
    polylines: list[list[Point]] = field(default_factory=list)

    def start_new(self, p: Point) -> None:
        self.polylines.append([p])

    def current(self) -> list[Point]:
        if not self.polylines:
            raise RuntimeError("current() called before start_new()")
        return self.polylines[-1]

    def add_point(self, p: Point) -> None:
        cur = self.current()
        if not cur or cur[-1] != p:
            cur.append(p)


class Turtle:
    """Mutable pen state: position, heading, branch stack and drawn lines."""

    def __init__(
        self,
        *,
        angle_deg: float,
        step: float = 10.0,
        start: TurtleState = TurtleState(0.0, 0.0, 0.0),
    ) -> None:
        _require(step > 0, "turtle step must be > 0")
        self.angle_deg = angle_deg
        self.step = step
        self.x, self.y, self.heading_deg = start.x, start.y, start.heading_deg
        self.stack: list[TurtleState] = []
        self.buffer = PolylineBuffer()
        self.buffer.start_new((self.x, self.y))

    @property
    def state(self) -> TurtleState:
        return TurtleState(self.x, self.y, self.heading_deg)

    def forward(self, *, draw: bool = True, mult: float = 1.0) -> None:
        dist = self.step * mult
        rad = math.radians(self.heading_deg)
        nx = self.x + dist * math.cos(rad)
        ny = self.y + dist * math.sin(rad)
        if draw:
            self.buffer.add_point((nx, ny))
        else:
            # Pen-up move: the next stroke starts at the destination.
            self.buffer.start_new((nx, ny))
        self.x, self.y = nx, ny

    def turn(self, direction: int, mult: float = 1.0) -> None:
        self.heading_deg += direction * mult * self.angle_deg

    def turn_abs(self, degrees: float) -> None:
        self.heading_deg += degrees

    def push(self) -> None:
        # The branch keeps extending the active polyline; only pop splits it.
        self.stack.append(self.state)

    def pop(self) -> None:
        _require(bool(self.stack), "pop encountered with empty stack")
        st = self.stack.pop()
        self.x, self.y, self.heading_deg = st.x, st.y, st.heading_deg
        self.buffer.start_new((self.x, self.y))

    def polylines(self) -> list[list[Point]]:
        """Drawn polylines with empty and single-point ones removed."""
        return [pl for pl in self.buffer.polylines if len(pl) >= 2]


def build_action(command: Any, symbol: str = "?") -> Action | None:
    """Turn one command-table value into an action on a :class:`Turtle`.

    A list of command objects becomes one action running them in order,
    which is how a multi-letter pattern gets drawing semantics. Returns None
    for ``noop`` (and for a list of only noops) so the symbol carries no
    semantics.
    """
    if isinstance(command, (list, tuple)):
        steps = [build_action(c, symbol) for c in command]
        actions = [a for a in steps if a is not None]
        if not actions:
            return None

        def sequence(subword: Word, turtle: Turtle) -> None:
            for action in actions:
                action(subword, turtle)

        return sequence

    _require(isinstance(command, Mapping), f"command for '{symbol}' must be an object")
    atype = command.get("type")
    _require(isinstance(atype, str), f"command for '{symbol}' must have string field 'type'")

    if atype == "noop":
        return None

    if atype == "forward":
        draw = _as_bool(command.get("draw"), f"forward command for '{symbol}' field 'draw'")
        mult = _as_float(command.get("step", 1), f"forward command for '{symbol}' field 'step'")

        def forward(subword: Word, turtle: Turtle) -> None:
            turtle.forward(draw=draw, mult=mult)

        return forward

    if atype == "turn":
        direction = command.get("direction")
        _require(
            direction in (-1, 1) and isinstance(direction, int),
            f"turn command for '{symbol}' must have direction -1 or 1",
        )
        mult = _as_float(command.get("angle", 1), f"turn command for '{symbol}' field 'angle'")
        sign = cast(int, direction)

        def turn(subword: Word, turtle: Turtle) -> None:
            turtle.turn(sign, mult)

        return turn

    if atype == "turn_abs":
        degrees = _as_float(command.get("angle"), f"command '{symbol}'.angle")

        def turn_abs(subword: Word, turtle: Turtle) -> None:
            turtle.turn_abs(degrees)

        return turn_abs

    if atype == "push":
        return lambda subword, turtle: turtle.push()

    if atype == "pop":
        return lambda subword, turtle: turtle.pop()

    raise ConfigError(f"Unknown command type '{atype}' for symbol '{symbol}'")


def attach_commands(dictionary: Dictionary, commands: Mapping[str, Any]) -> None:
    """Install a command table's actions on text-pattern keys."""
    for pattern, command in commands.items():
        _require(
            isinstance(pattern, str) and len(pattern) > 0,
            "command keys must be non-empty strings",
        )
        dictionary.set_action(Word.from_text(pattern), build_action(command, pattern))
