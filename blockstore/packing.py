"""Variable-width packing of palette ids into 64-bit words.

Two word layouts are supported:

``aligned``
    An id never straddles a word boundary. Each word holds
    ``64 // bit_width`` ids starting at bit 0; leftover high bits are zero.

``dense``
    Ids form one continuous little-endian bitstream cut into 64-bit words, so
    an id may start in one word and finish in the next. Only the tail of the
    last word is padded.

Words are returned as ``numpy.int64`` because the external record stores
signed longs; the bit pattern is what matters.
"""
from __future__ import annotations

from typing import Iterable, Optional, Union

import numpy as np

from blockstore import config, trace
from blockstore.errors import RegionDecodeError

WORD_BITS = 64
MIN_BITS = 2

ALIGNED = "aligned"
DENSE = "dense"
LAYOUTS = (ALIGNED, DENSE)

IdArray = Union[np.ndarray, Iterable[int]]


def bits_for(palette_size: int) -> int:
    """Smallest width >= 2 whose range covers ``palette_size`` ids."""
    bits = MIN_BITS
    while (1 << bits) < palette_size:
        bits += 1
    return bits


def resolve_layout(layout: Optional[str] = None) -> str:
    chosen = layout if layout is not None else config.get("packing.layout", ALIGNED)
    if chosen not in LAYOUTS:
        raise ValueError(f"unknown packing layout {chosen!r}; expected one of {LAYOUTS}")
    return chosen


def _check_width(bit_width: int) -> None:
    if not 1 <= bit_width <= WORD_BITS:
        raise ValueError(f"bit width must be in [1, {WORD_BITS}], got {bit_width}")


def words_needed(length: int, bit_width: int, layout: Optional[str] = None) -> int:
    _check_width(bit_width)
    if resolve_layout(layout) == ALIGNED:
        per_word = WORD_BITS // bit_width
        return -(-length // per_word)
    return -(-(length * bit_width) // WORD_BITS)


def _as_ids(ids: IdArray, bit_width: int) -> np.ndarray:
    values = np.asarray(ids if isinstance(ids, np.ndarray) else list(ids))
    values = values.reshape(-1)
    if values.size == 0:
        return np.zeros(0, dtype=np.uint64)
    if values.dtype.kind not in "iu":
        raise ValueError(f"ids must be integers, got dtype {values.dtype}")
    if int(values.min()) < 0:
        raise ValueError("ids must be non-negative")
    if bit_width < WORD_BITS and int(values.max()) >= (1 << bit_width):
        raise ValueError(f"id {int(values.max())} does not fit in {bit_width} bits")
    return values.astype(np.uint64)


def _as_words(words: IdArray) -> np.ndarray:
    arr = np.asarray(words if isinstance(words, np.ndarray) else list(words))
    arr = arr.reshape(-1)
    if arr.size == 0:
        return np.zeros(0, dtype=np.uint64)
    if arr.dtype == np.uint64:
        return arr
    if arr.dtype.kind not in "iu":
        raise RegionDecodeError(f"packed words must be integers, got dtype {arr.dtype}")
    return arr.astype(np.int64).view(np.uint64)


def _pack_aligned(values: np.ndarray, bit_width: int, n_words: int) -> np.ndarray:
    per_word = WORD_BITS // bit_width
    padded = np.zeros(n_words * per_word, dtype=np.uint64)
    padded[: values.size] = values
    shifts = np.arange(per_word, dtype=np.uint64) * np.uint64(bit_width)
    return np.bitwise_or.reduce(padded.reshape(n_words, per_word) << shifts, axis=1)


def _pack_dense(values: np.ndarray, bit_width: int, n_words: int) -> np.ndarray:
    bit_idx = np.arange(bit_width, dtype=np.uint64)
    bits = ((values[:, None] >> bit_idx) & np.uint64(1)).reshape(-1)
    stream = np.zeros(n_words * WORD_BITS, dtype=np.uint64)
    stream[: bits.size] = bits
    word_shifts = np.arange(WORD_BITS, dtype=np.uint64)
    return np.bitwise_or.reduce(stream.reshape(n_words, WORD_BITS) << word_shifts, axis=1)


def pack(ids: IdArray, bit_width: int, layout: Optional[str] = None) -> np.ndarray:
    """Pack ``ids`` into signed 64-bit words using ``bit_width`` bits each."""
    _check_width(bit_width)
    layout = resolve_layout(layout)
    values = _as_ids(ids, bit_width)
    n_words = words_needed(values.size, bit_width, layout)
    if n_words == 0:
        return np.zeros(0, dtype=np.int64)

    if layout == ALIGNED:
        words = _pack_aligned(values, bit_width, n_words)
    else:
        words = _pack_dense(values, bit_width, n_words)
    trace.emit("packing", op="pack", layout=layout, bits=bit_width, ids=values.size, words=n_words)
    return words.astype(np.uint64).view(np.int64)


def unpack(
    words: IdArray, bit_width: int, length: int, layout: Optional[str] = None
) -> np.ndarray:
    """Inverse of :func:`pack`; returns ``length`` ids as ``numpy.uint64``.

    The word count must match exactly what :func:`pack` would produce for
    ``length`` ids; anything else raises :class:`RegionDecodeError`.
    """
    _check_width(bit_width)
    layout = resolve_layout(layout)
    if length < 0:
        raise ValueError("length must be non-negative")
    raw = _as_words(words)
    expected = words_needed(length, bit_width, layout)
    if raw.size != expected:
        raise RegionDecodeError(
            f"expected {expected} packed words for {length} ids at {bit_width} bits "
            f"({layout}), got {raw.size}"
        )
    if length == 0:
        return np.zeros(0, dtype=np.uint64)

    mask = np.uint64((1 << bit_width) - 1)
    if layout == ALIGNED:
        per_word = WORD_BITS // bit_width
        shifts = np.arange(per_word, dtype=np.uint64) * np.uint64(bit_width)
        values = ((raw[:, None] >> shifts) & mask).reshape(-1)[:length]
    else:
        word_shifts = np.arange(WORD_BITS, dtype=np.uint64)
        bits = ((raw[:, None] >> word_shifts) & np.uint64(1)).reshape(-1)
        bits = bits[: length * bit_width].reshape(length, bit_width)
        bit_idx = np.arange(bit_width, dtype=np.uint64)
        values = np.bitwise_or.reduce(bits << bit_idx, axis=1)
    trace.emit("packing", op="unpack", layout=layout, bits=bit_width, ids=length, words=raw.size)
    return values.astype(np.uint64)
