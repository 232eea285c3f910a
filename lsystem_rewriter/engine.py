"""Generation driver: rewriting and semantic dispatch over segmented words."""

from __future__ import annotations

import logging
from typing import Any

from .dictionary import Dictionary
from .errors import DepthLimitExceeded, InvalidDepth
from .segmenter import Segmenter
from .word import Word

logger = logging.getLogger(__name__)


def advance_generation(
    current: Word, dictionary: Dictionary, segmenter: Segmenter | None = None
) -> Word:
    """Rewrite every segment of ``current`` by its replacement.

    Segments without a replacement are copied unchanged. The word is fully
    segmented before anything is built, so a segmentation failure leaves no
    partial result behind.
    """
    if segmenter is None:
        segmenter = Segmenter(dictionary)
    spans = segmenter.spans(current)

    out = Word()
    for start, stop in spans:
        piece = current.slice(start, stop)
        entry = dictionary.get(piece)
        if entry is not None and entry.replacement is not None:
            out.append(entry.replacement)
        else:
            out.append(piece)
    return out


def apply_semantics(
    word: Word,
    dictionary: Dictionary,
    payload: Any,
    segmenter: Segmenter | None = None,
) -> int:
    """Run each segment's action against ``payload`` in textual order.

    Segments without an action are skipped. Returns the number of actions
    invoked.
    """
    if segmenter is None:
        segmenter = Segmenter(dictionary)
    pieces = segmenter.segment(word)

    invoked = 0
    for piece in pieces:
        entry = dictionary.get(piece)
        if entry is None or entry.action is None:
            continue
        entry.action(piece, payload)
        invoked += 1
    return invoked


class Fractal:
    """An axiom plus a dictionary, with a cache of computed generations.

    ``generation_at(k)`` is O(1) once depth k has been computed. Generations
    are never modified after they are cached. Every accessor hands out a
    copy, so callers may mutate what they receive.
    """

    def __init__(
        self, axiom: Word, dictionary: Dictionary, *, max_depth: int | None = None
    ) -> None:
        if max_depth is not None and max_depth < 0:
            raise InvalidDepth("max_depth", max_depth)
        self.dictionary = dictionary
        self.max_depth = max_depth
        self._segmenter = Segmenter(dictionary)
        self._generations: list[Word] = [axiom.copy()]

    @property
    def axiom(self) -> Word:
        return self._generations[0].copy()

    @property
    def computed_depth(self) -> int:
        return len(self._generations) - 1

    def _check_depth(self, depth: int) -> None:
        if depth < 0:
            raise InvalidDepth("depth", depth)
        if self.max_depth is not None and depth > self.max_depth:
            raise DepthLimitExceeded(depth, self.max_depth)

    def advance(self) -> Word:
        """Compute, cache and return the next generation."""
        return self._step().copy()

    def _step(self) -> Word:
        depth = len(self._generations)
        self._check_depth(depth)
        nxt = advance_generation(self._generations[-1], self.dictionary, self._segmenter)
        self._generations.append(nxt)
        logger.debug("generation %d computed: %d letters", depth, len(nxt))
        return nxt

    def generation_at(self, depth: int) -> Word:
        self._compute_to(depth)
        return self._generations[depth].copy()

    def _compute_to(self, depth: int) -> None:
        self._check_depth(depth)
        while len(self._generations) <= depth:
            self._step()

    def generations(self, depth: int) -> list[Word]:
        self._compute_to(depth)
        return [w.copy() for w in self._generations[: depth + 1]]

    def reset(self) -> None:
        """Drop every cached generation except the axiom."""
        del self._generations[1:]

    def apply_semantics(self, payload: Any, depth: int | None = None) -> int:
        if depth is not None:
            self._compute_to(depth)
        word = self._generations[-1 if depth is None else depth]
        invoked = apply_semantics(word, self.dictionary, payload, self._segmenter)
        logger.debug("semantics applied at depth %s: %d actions", depth, invoked)
        return invoked
