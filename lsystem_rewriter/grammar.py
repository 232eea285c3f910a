"""Production rules and the grammar validator."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .dictionary import Dictionary
from .errors import EmptyKeyRejected, OverlappingAlphabets, UnknownNonTerminal, UnknownTerminal
from .word import Alphabet, Letter, Word


@dataclass(frozen=True)
class ProductionRule:
    lhs: Word
    rhs: Word

    def __post_init__(self) -> None:
        if not self.lhs:
            raise EmptyKeyRejected("rule left-hand side")

    @classmethod
    def from_text(cls, lhs: str, rhs: str) -> ProductionRule:
        return cls(Word.from_text(lhs), Word.from_text(rhs))

    def __str__(self) -> str:
        return f"{self.lhs} -> {self.rhs}"


def validate(
    terminals: Iterable[Letter],
    non_terminals: Iterable[Letter],
    rules: Iterable[ProductionRule],
) -> None:
    """Check rule symbols against the declared alphabets.

    Stops at the first violation. The LHS must be made of known letters and
    hold at least one non-terminal; the RHS may use any known letter.
    """
    t = Alphabet(terminals)
    nt = Alphabet(non_terminals)
    known = t | nt

    for index, rule in enumerate(rules):
        unknown = known.missing(rule.lhs)
        if unknown:
            raise UnknownNonTerminal(index, "lhs", unknown[0])
        if not any(letter in nt for letter in rule.lhs):
            raise UnknownNonTerminal(index, "lhs", rule.lhs[0])
        unknown = known.missing(rule.rhs)
        if unknown:
            raise UnknownTerminal(index, "rhs", unknown[0])


class Grammar:
    def __init__(
        self,
        terminals: Iterable[Letter],
        non_terminals: Iterable[Letter],
        rules: Iterable[ProductionRule] = (),
    ) -> None:
        self.terminals = Alphabet(terminals)
        self.non_terminals = Alphabet(non_terminals)
        overlap = [x for x in self.terminals if x in self.non_terminals]
        if overlap:
            raise OverlappingAlphabets(overlap)
        self.rules: tuple[ProductionRule, ...] = tuple(rules)
        validate(self.terminals, self.non_terminals, self.rules)

    def with_rules(self, rules: Sequence[ProductionRule]) -> Grammar:
        return Grammar(self.terminals, self.non_terminals, rules)

    @property
    def alphabet(self) -> Alphabet:
        return self.terminals | self.non_terminals

    def to_dictionary(self) -> Dictionary:
        """Every symbol as an identity key, then each rule's replacement."""
        d = Dictionary()
        for letter in self.alphabet:
            d.insert(Word.from_letter(letter))
        for rule in self.rules:
            d.set_replacement(rule.lhs, rule.rhs)
        return d
