"""Error kinds raised by the rewriting engine and its collaborators."""

from __future__ import annotations

from collections.abc import Hashable, Iterable


class RewriteError(Exception):
    """Base class for every error raised by lsystem_rewriter."""


class IndexOutOfBounds(RewriteError, IndexError):
    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} out of bounds for word of length {length}")
        self.index = index
        self.length = length


class EmptyKeyRejected(RewriteError, ValueError):
    def __init__(self, what: str = "dictionary key") -> None:
        super().__init__(f"{what} must not be empty")


class NoMatchAtPosition(RewriteError):
    """No dictionary key prefixes the word at ``position``."""

    def __init__(self, position: int, letter: Hashable | None = None) -> None:
        msg = f"no dictionary key matches at position {position}"
        if letter is not None:
            msg += f" (letter {str(letter)!r})"
        super().__init__(msg)
        self.position = position
        self.letter = letter


class UnknownKey(RewriteError, KeyError):
    def __init__(self, key: object) -> None:
        super().__init__(f"no dictionary entry for {str(key)!r}")
        self.key = key

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0])


class InvalidDepth(RewriteError, ValueError):
    def __init__(self, what: str, value: int) -> None:
        super().__init__(f"{what} must be >= 0, got {value}")
        self.value = value


class DepthLimitExceeded(RewriteError, ValueError):
    def __init__(self, depth: int, max_depth: int) -> None:
        super().__init__(f"depth {depth} exceeds the configured maximum of {max_depth}")
        self.depth = depth
        self.max_depth = max_depth


# -------------------------
# Grammar validation
# -------------------------


class GrammarError(RewriteError, ValueError):
    pass


class _RuleViolation(GrammarError):
    kind = "symbol"

    def __init__(self, rule_index: int, side: str, letter: Hashable) -> None:
        super().__init__(
            f"rule {rule_index}: {side} contains unknown {self.kind} {str(letter)!r}"
        )
        self.rule_index = rule_index
        self.side = side
        self.letter = letter


class UnknownTerminal(_RuleViolation):
    kind = "terminal"


class UnknownNonTerminal(_RuleViolation):
    kind = "non-terminal"


class OverlappingAlphabets(GrammarError):
    def __init__(self, letters: Iterable[Hashable]) -> None:
        self.letters = frozenset(letters)
        shown = ", ".join(sorted(repr(str(x)) for x in self.letters))
        super().__init__(f"terminals and non-terminals overlap: {shown}")


# -------------------------
# CLI / command tables
# -------------------------


class ConfigError(RewriteError, ValueError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigError(msg)
