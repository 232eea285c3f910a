"""Built-in fractal catalogue.

Every preset is a char-alphabet L-system with a turtle command table. The
conventional letters are:

  F, W   draw forward          f   move forward, pen up
  +, -   turn left / right     |   turn around
  [, ]   push / pop            X, A, B   structure only, no drawing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .dictionary import Dictionary
from .engine import Fractal
from .errors import ConfigError
from .grammar import Grammar, ProductionRule
from .turtle import Turtle, TurtleState, attach_commands
from .word import Word

BASE_COMMANDS: dict[str, Any] = {
    "F": {"type": "forward", "draw": True},
    "W": {"type": "forward", "draw": True},
    "f": {"type": "forward", "draw": False},
    "+": {"type": "turn", "direction": +1},
    "-": {"type": "turn", "direction": -1},
    "|": {"type": "turn_abs", "angle": 180},
    "[": {"type": "push"},
    "]": {"type": "pop"},
}


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    axiom: str
    rules: dict[str, str]
    angle_deg: float
    default_depth: int = 4
    heading_deg: float = 0.0
    extra_commands: dict[str, Any] = field(default_factory=dict)

    @property
    def commands(self) -> dict[str, Any]:
        return {**BASE_COMMANDS, **self.extra_commands}

    def dictionary(self) -> Dictionary:
        """Rules plus an action for every command pattern."""
        d = Dictionary.from_text_rules(self.rules, alphabet=self.axiom)
        attach_commands(d, self.commands)
        return d

    def build(self, *, max_depth: int | None = None) -> Fractal:
        return Fractal(Word.from_text(self.axiom), self.dictionary(), max_depth=max_depth)

    def turtle(self, step: float = 10.0) -> Turtle:
        return Turtle(
            angle_deg=self.angle_deg,
            step=step,
            start=TurtleState(0.0, 0.0, self.heading_deg),
        )

    def grammar(self) -> Grammar:
        """Letters with a rule are non-terminals, the rest terminals."""
        letters = set(self.axiom)
        for lhs, rhs in self.rules.items():
            letters.update(lhs)
            letters.update(rhs)
        # Single-letter rule keys are the rewritten symbols. A context rule
        # made of none of them contributes its first letter.
        non_terminals = {lhs for lhs in self.rules if len(lhs) == 1}
        for lhs in self.rules:
            if len(lhs) > 1 and not non_terminals.intersection(lhs):
                non_terminals.add(lhs[0])
        return Grammar(
            letters - non_terminals,
            non_terminals,
            [ProductionRule.from_text(lhs, rhs) for lhs, rhs in self.rules.items()],
        )


PRESETS: dict[str, Preset] = {
    p.name: p
    for p in (
        Preset(
            name="koch",
            description="Koch curve",
            axiom="F",
            rules={"F": "F+F--F+F"},
            angle_deg=60,
        ),
        Preset(
            name="levy",
            description="Levy C curve",
            axiom="F",
            rules={"F": "+F--F+"},
            angle_deg=45,
            default_depth=10,
        ),
        Preset(
            name="sierpinski_carpet",
            description="Sierpinski carpet variant with pen-up jumps",
            axiom="F",
            rules={"F": "F+F-F-FF-F-F-fF", "f": "fff"},
            angle_deg=90,
            default_depth=3,
        ),
        Preset(
            name="sierpinski_triangle",
            description="Sierpinski triangle with pen-up jumps",
            axiom="F--F--F",
            rules={"F": "F--F--F--ff", "f": "ff"},
            angle_deg=60,
            default_depth=5,
        ),
        Preset(
            name="dragon",
            description="Heighway dragon curve",
            axiom="F",
            rules={"F": "+F--W+", "W": "-F++W-"},
            angle_deg=45,
            default_depth=10,
        ),
        Preset(
            name="gosper",
            description="Gosper flowsnake",
            axiom="F",
            rules={"F": "F+W++W-F--FF-W+", "W": "-F+WW++W+F--F-W"},
            angle_deg=60,
        ),
        Preset(
            name="hilbert",
            description="Hilbert space-filling curve",
            axiom="A",
            rules={"A": "+BF-AFA-FB+", "B": "-AF+BFB+FA-"},
            angle_deg=90,
            default_depth=5,
        ),
        Preset(
            name="arrowhead",
            description="Sierpinski arrowhead curve",
            axiom="F",
            rules={"F": "-W+F+W-", "W": "+F-W-F+"},
            angle_deg=60,
            default_depth=6,
        ),
        Preset(
            name="pentaplexity",
            description="Pentaplexity tiling curve",
            axiom="F++F++F++F++F",
            rules={"F": "F++F++F|F-F++F"},
            angle_deg=36,
            default_depth=3,
        ),
        Preset(
            name="plant",
            description="Branching fractal plant",
            axiom="X",
            rules={"X": "F+[[X]-X]-F[-FX]+X", "F": "FF"},
            angle_deg=25,
            default_depth=5,
            heading_deg=90,
        ),
        Preset(
            name="plant_bush",
            description="Bushy fractal plant",
            axiom="X",
            rules={"X": "F+[+[---[X]X]X]FX", "F": "FF"},
            angle_deg=25,
            default_depth=5,
            heading_deg=90,
        ),
        Preset(
            name="square_munch",
            description="Square curve with a two-letter rule on 'F+'",
            axiom="F+F+F+F",
            rules={"F": "F-F+F+F-F", "F+": "FF+"},
            angle_deg=90,
            default_depth=3,
            extra_commands={
                "F+": [
                    {"type": "forward", "draw": True},
                    {"type": "turn", "direction": +1},
                ],
            },
        ),
    )
}


def get_preset(name: str) -> Preset:
    try:
        return PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ConfigError(f"Unknown preset '{name}' (known: {known})") from None
