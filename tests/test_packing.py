import random

import numpy as np
import pytest

from blockstore.errors import RegionDecodeError
from blockstore.packing import ALIGNED, DENSE, bits_for, pack, unpack, words_needed


def test_bits_for_palette_sizes():
    assert bits_for(1) == 2
    assert bits_for(2) == 2
    assert bits_for(4) == 2
    assert bits_for(5) == 3
    assert bits_for(8) == 3
    assert bits_for(9) == 4
    assert bits_for(257) == 9


def test_aligned_low_bits_first():
    words = pack([1, 2, 3], 2, ALIGNED)
    assert words.dtype == np.int64
    assert words.tolist() == [1 | (2 << 2) | (3 << 4)]


def test_aligned_never_splits_an_id():
    ids = [0] * 21 + [7]
    words = pack(ids, 3, ALIGNED)
    # 21 ids use 63 bits; the 22nd starts a fresh word.
    assert words.tolist() == [0, 7]
    assert words_needed(22, 3, ALIGNED) == 2


def test_dense_spans_word_boundary():
    ids = [0] * 21 + [7]
    words = pack(ids, 3, DENSE)
    assert words.tolist() == [-(2 ** 63), 3]
    assert unpack(words, 3, 22, DENSE).tolist() == ids


def test_high_bit_words_are_signed():
    words = pack([3] * 32, 2, ALIGNED)
    assert words.tolist() == [-1]
    assert unpack(words, 2, 32, ALIGNED).tolist() == [3] * 32


@pytest.mark.parametrize("layout", [ALIGNED, DENSE])
def test_round_trip_random_arrays(layout):
    rng = random.Random(1234)
    for width in range(2, 17):
        length = rng.randint(0, 300)
        ids = [rng.randrange(1 << width) for _ in range(length)]
        words = pack(ids, width, layout)
        assert len(words) == words_needed(length, width, layout)
        assert unpack(words, width, length, layout).tolist() == ids


def test_unpack_accepts_plain_python_ints():
    words = pack(np.arange(40) % 5, 3, ALIGNED)
    back = unpack([int(w) for w in words], 3, 40, ALIGNED)
    assert back.tolist() == [i % 5 for i in range(40)]


def test_empty_array():
    assert pack([], 2).size == 0
    assert unpack([], 2, 0).size == 0


def test_word_count_mismatch_is_a_decode_error():
    words = pack(list(range(4)) * 10, 2, ALIGNED)
    with pytest.raises(RegionDecodeError):
        unpack(words[:-1], 2, 40, ALIGNED)
    with pytest.raises(RegionDecodeError):
        unpack(np.append(words, 0), 2, 40, ALIGNED)


def test_pack_rejects_ids_that_do_not_fit():
    with pytest.raises(ValueError):
        pack([0, 4], 2)
    with pytest.raises(ValueError):
        pack([-1], 2)
    with pytest.raises(ValueError):
        pack([1], 0)


def test_unknown_layout():
    with pytest.raises(ValueError):
        pack([1], 2, "sparse")


def test_layout_default_comes_from_config(tmp_path, monkeypatch):
    from blockstore import config

    cfg = tmp_path / "blockstore.json"
    cfg.write_text('{"packing": {"layout": "dense"}}', encoding="utf-8")
    monkeypatch.setenv("BLOCKSTORE_CONFIG", str(cfg))
    config.reload()

    ids = [0] * 21 + [7]
    assert pack(ids, 3).tolist() == pack(ids, 3, DENSE).tolist()
    assert words_needed(64, 3) == 3
