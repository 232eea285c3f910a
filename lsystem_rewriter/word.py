"""Letters, alphabets and words.

A letter is any hashable value whose ``str()`` is its display form: single
characters for text alphabets, enum members, small ints, frozen dataclasses.
A :class:`Word` is an ordered sequence of letters compared and hashed by
content, so two words with the same letters are interchangeable as
dictionary keys no matter how they were built.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator
from typing import overload

from .errors import IndexOutOfBounds

Letter = Hashable


class Alphabet:
    """Immutable set of distinct letters."""

    __slots__ = ("_letters",)

    def __init__(self, letters: Iterable[Letter] = ()) -> None:
        self._letters = frozenset(letters)

    @classmethod
    def from_text(cls, text: str) -> Alphabet:
        return cls(text)

    def __contains__(self, letter: object) -> bool:
        return letter in self._letters

    def __iter__(self) -> Iterator[Letter]:
        return iter(self._letters)

    def __len__(self) -> int:
        return len(self._letters)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Alphabet):
            return self._letters == other._letters
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._letters)

    def __or__(self, other: Alphabet) -> Alphabet:
        return Alphabet(self._letters | other._letters)

    def __repr__(self) -> str:
        shown = "".join(sorted(str(x) for x in self._letters))
        return f"Alphabet({shown!r})"

    def missing(self, word: Iterable[Letter]) -> list[Letter]:
        """Letters of ``word`` outside this alphabet, in first-seen order."""
        out: list[Letter] = []
        seen: set[Letter] = set()
        for letter in word:
            if letter not in self._letters and letter not in seen:
                seen.add(letter)
                out.append(letter)
        return out


class Word:
    """Ordered, growable sequence of letters.

    The operation set is closed on purpose: reads, slicing, prefix tests and
    a handful of positional edits. Positional edits raise
    :class:`IndexOutOfBounds` instead of clamping.
    """

    __slots__ = ("_letters",)

    def __init__(self, letters: Iterable[Letter] = ()) -> None:
        self._letters: list[Letter] = list(letters)

    # -- construction ------------------------------------------------------

    @classmethod
    def from_letter(cls, letter: Letter) -> Word:
        return cls((letter,))

    @classmethod
    def from_iterable(cls, letters: Iterable[Letter]) -> Word:
        return cls(letters)

    @classmethod
    def from_text(cls, text: str) -> Word:
        """One character per letter, for char alphabets."""
        return cls(text)

    @staticmethod
    def concat(a: Word, b: Word) -> Word:
        out = Word(a._letters)
        out._letters.extend(b._letters)
        return out

    def copy(self) -> Word:
        return Word(self._letters)

    # -- queries -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._letters)

    def __bool__(self) -> bool:
        return bool(self._letters)

    def is_empty(self) -> bool:
        return not self._letters

    def __iter__(self) -> Iterator[Letter]:
        return iter(self._letters)

    @overload
    def __getitem__(self, index: int) -> Letter: ...

    @overload
    def __getitem__(self, index: slice) -> Word: ...

    def __getitem__(self, index: int | slice) -> Letter | Word:
        n = len(self._letters)
        if isinstance(index, slice):
            if index.step not in (None, 1):
                raise ValueError("Word slices do not support a step")
            start = 0 if index.start is None else index.start
            stop = n if index.stop is None else index.stop
            # Negative bounds count from the end once, like a list.
            if start < 0:
                start += n
            if stop < 0:
                stop += n
            return self.slice(start, stop)
        if not -n <= index < n:
            raise IndexOutOfBounds(index, n)
        return self._letters[index]

    def slice(self, start: int, stop: int) -> Word:
        """Return letters ``[start, stop)`` as a new word."""
        n = len(self._letters)
        if stop > n or stop < 0:
            raise IndexOutOfBounds(stop, n)
        if start > stop or start < 0:
            raise IndexOutOfBounds(start, n)
        return Word(self._letters[start:stop])

    def starts_with(self, pattern: Iterable[Letter], start: int = 0) -> bool:
        letters = self._letters
        n = len(letters)
        i = start
        for letter in pattern:
            if i >= n or letters[i] != letter:
                return False
            i += 1
        return True

    def count(self, letter: Letter) -> int:
        return self._letters.count(letter)

    def alphabet(self) -> Alphabet:
        return Alphabet(self._letters)

    # -- mutation ----------------------------------------------------------

    def append(self, other: Word) -> None:
        self._letters.extend(other._letters)

    def push(self, letter: Letter) -> None:
        self._letters.append(letter)

    def insert(self, index: int, letter: Letter) -> None:
        n = len(self._letters)
        if index < 0 or index > n:
            raise IndexOutOfBounds(index, n)
        self._letters.insert(index, letter)

    def remove(self, index: int) -> Letter:
        n = len(self._letters)
        if index < 0 or index >= n:
            raise IndexOutOfBounds(index, n)
        return self._letters.pop(index)

    def split_off(self, index: int) -> Word:
        """Remove and return the tail starting at ``index``."""
        n = len(self._letters)
        if index < 0 or index > n:
            raise IndexOutOfBounds(index, n)
        tail = Word(self._letters[index:])
        del self._letters[index:]
        return tail

    # -- value semantics ---------------------------------------------------

    def __add__(self, other: Word) -> Word:
        if not isinstance(other, Word):
            return NotImplemented
        return Word.concat(self, other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Word):
            return self._letters == other._letters
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._letters))

    def __str__(self) -> str:
        return "".join(str(x) for x in self._letters)

    def __repr__(self) -> str:
        return f"Word({str(self)!r})"
