"""Maximal-munch segmentation of a word into dictionary keys."""

from __future__ import annotations

import logging
from typing import Any

from .dictionary import Dictionary
from .errors import NoMatchAtPosition
from .word import Word

logger = logging.getLogger(__name__)

# Trie node: letter -> child node. The _END marker holds the key length when
# a dictionary key ends at this node.
_END = object()
_Node = dict[Any, Any]


class Segmenter:
    """Splits words into the longest dictionary keys, left to right.

    The keys are indexed in a prefix trie, rebuilt lazily whenever the
    dictionary's version changes. Matching at one position walks at most
    ``dictionary.max_key_length`` trie nodes, so a word of length n is
    segmented in O(n * k).
    """

    def __init__(self, dictionary: Dictionary) -> None:
        self.dictionary = dictionary
        self._root: _Node = {}
        self._indexed_version = -1
        self._max_len = 0

    def _index(self) -> _Node:
        if self._indexed_version != self.dictionary.version:
            root: _Node = {}
            for key in self.dictionary.keys():
                node = root
                for letter in key:
                    node = node.setdefault(letter, {})
                node[_END] = len(key)
            self._root = root
            self._max_len = self.dictionary.max_key_length
            self._indexed_version = self.dictionary.version
        return self._root

    def longest_match(self, word: Word, start: int) -> int:
        """Length of the longest key prefixing ``word[start:]``; 0 if none."""
        node = self._index()
        best = 0
        for i in range(start, min(len(word), start + self._max_len)):
            node = node.get(word[i])
            if node is None:
                break
            if _END in node:
                best = i + 1 - start
        return best

    def spans(self, word: Word) -> list[tuple[int, int]]:
        """Half-open ``(start, stop)`` spans of the segmentation."""
        out: list[tuple[int, int]] = []
        pos = 0
        n = len(word)
        while pos < n:
            length = self.longest_match(word, pos)
            if not length:
                logger.debug(
                    "segmentation stopped at %d of %d (letter %r)", pos, n, word[pos]
                )
                raise NoMatchAtPosition(pos, word[pos])
            out.append((pos, pos + length))
            pos += length
        return out

    def segment(self, word: Word) -> list[Word]:
        return [word.slice(start, stop) for start, stop in self.spans(word)]


def segment(word: Word, dictionary: Dictionary) -> list[Word]:
    return Segmenter(dictionary).segment(word)
