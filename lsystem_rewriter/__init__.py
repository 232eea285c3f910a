"""L-system rewriting engine.

Words are split into the longest matching dictionary patterns, each pattern
is replaced by its production rule, and the result becomes the next
generation. The same segmentation drives semantic actions against a
caller-owned payload, for example a turtle that draws the curve.
"""

from .dictionary import Action, Dictionary, Entry
from .engine import Fractal, advance_generation, apply_semantics
from .errors import (
    ConfigError,
    DepthLimitExceeded,
    EmptyKeyRejected,
    GrammarError,
    IndexOutOfBounds,
    InvalidDepth,
    NoMatchAtPosition,
    OverlappingAlphabets,
    RewriteError,
    UnknownKey,
    UnknownNonTerminal,
    UnknownTerminal,
)
from .grammar import Grammar, ProductionRule, validate
from .segmenter import Segmenter, segment
from .word import Alphabet, Letter, Word

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Alphabet",
    "ConfigError",
    "DepthLimitExceeded",
    "Dictionary",
    "EmptyKeyRejected",
    "Entry",
    "Fractal",
    "Grammar",
    "GrammarError",
    "IndexOutOfBounds",
    "InvalidDepth",
    "Letter",
    "NoMatchAtPosition",
    "OverlappingAlphabets",
    "ProductionRule",
    "RewriteError",
    "Segmenter",
    "UnknownKey",
    "UnknownNonTerminal",
    "UnknownTerminal",
    "Word",
    "advance_generation",
    "apply_semantics",
    "segment",
    "validate",
]
