"""The pattern table shared by rewriting and semantics.

Each non-empty key word maps to an :class:`Entry` holding an optional
replacement (the right-hand side of a production rule) and an optional
action run during a semantics pass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from typing import Any

from .errors import EmptyKeyRejected, UnknownKey
from .word import Word

Action = Callable[[Word, Any], None]


@dataclass(frozen=True)
class Entry:
    replacement: Word | None = None
    action: Action | None = None

    def with_replacement(self, replacement: Word | None) -> Entry:
        return replace(self, replacement=replacement)

    def with_action(self, action: Action | None) -> Entry:
        return replace(self, action=action)

    def __str__(self) -> str:
        repl = "None" if self.replacement is None else str(self.replacement)
        action = "None" if self.action is None else "Some"
        return f"Entry(replacement: {repl}, action: {action})"


class Dictionary:
    """Map from non-empty pattern words to entries (last write wins).

    Keys are copied on insert, so mutating a word after registering it does
    not disturb the table. ``version`` increases on every mutation and lets
    a :class:`~lsystem_rewriter.segmenter.Segmenter` know when to reindex.
    """

    def __init__(self) -> None:
        self._entries: dict[Word, Entry] = {}
        self._version = 0

    @classmethod
    def with_words(cls, words: Iterable[Word]) -> Dictionary:
        d = cls()
        for w in words:
            d.insert(w)
        return d

    @classmethod
    def with_entries(cls, pairs: Iterable[tuple[Word, Entry]]) -> Dictionary:
        d = cls()
        for w, entry in pairs:
            d.insert(w, entry)
        return d

    @classmethod
    def from_text_rules(cls, rules: Mapping[str, str], alphabet: str = "") -> Dictionary:
        """Build a char-alphabet dictionary from ``{pattern: replacement}``.

        Every letter of ``alphabet`` and every letter used by a rule also gets
        a single-letter identity entry, so any word over those letters can be
        segmented.
        """
        d = cls()
        letters: list[str] = list(alphabet)
        for lhs, rhs in rules.items():
            letters.extend(lhs)
            letters.extend(rhs)
        for ch in letters:
            key = Word.from_letter(ch)
            if key not in d:
                d.insert(key)
        for lhs, rhs in rules.items():
            d.set_replacement(Word.from_text(lhs), Word.from_text(rhs))
        return d

    @property
    def version(self) -> int:
        return self._version

    @property
    def max_key_length(self) -> int:
        return max((len(k) for k in self._entries), default=0)

    def insert(self, key: Word, entry: Entry | None = None) -> None:
        if not key:
            raise EmptyKeyRejected()
        if entry is None:
            entry = Entry()
        elif entry.replacement is not None:
            entry = entry.with_replacement(entry.replacement.copy())
        self._entries[key.copy()] = entry
        self._version += 1

    def get(self, key: Word) -> Entry | None:
        return self._entries.get(key)

    def remove(self, key: Word) -> Entry:
        try:
            entry = self._entries.pop(key)
        except KeyError:
            raise UnknownKey(key) from None
        self._version += 1
        return entry

    def set_replacement(self, key: Word, replacement: Word | None) -> None:
        current = self._entries.get(key, Entry())
        self.insert(key, current.with_replacement(replacement))

    def set_action(self, key: Word, action: Action | None) -> None:
        current = self._entries.get(key, Entry())
        self.insert(key, current.with_action(action))

    def keys(self) -> Iterator[Word]:
        return iter(list(self._entries))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        lines = ["Dictionary {"]
        for key, entry in self._entries.items():
            lines.append(f"\t{key} -> {entry}")
        lines.append("}")
        return "\n".join(lines)
