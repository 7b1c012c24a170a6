import random

import pytest
import reedsolo

from stripcode_ecc import (GF_EXP, GF_LOG, build_tables, ecc_count_for, gf_mul, gf_poly_eval,
                           rs_encode, rs_generator_poly)


def test_tables_rebuild_identically():
    """ecc: rebuilding the field tables reproduces the shared ones"""
    exp, log = build_tables()
    assert exp == GF_EXP
    assert log == GF_LOG
    assert build_tables() == build_tables()


def test_tables_layout():
    """ecc: exp covers 512 entries, wraps after 255, and inverts log"""
    assert len(GF_EXP) == 512
    assert len(GF_LOG) == 256
    assert GF_EXP[0] == 1
    assert GF_EXP[8] == 0x1D
    for i in range(255, 512):
        assert GF_EXP[i] == GF_EXP[i - 255]
    for i in range(255):
        assert GF_LOG[GF_EXP[i]] == i
    # every nonzero element shows up exactly once in one period
    assert sorted(GF_EXP[:255]) == list(range(1, 256))


def test_gf_mul():
    """ecc: field multiplication"""
    assert gf_mul(0, 77) == 0
    assert gf_mul(77, 0) == 0
    assert gf_mul(1, 200) == 200
    assert gf_mul(3, 7) == 9
    assert gf_mul(2, 128) == 0x1D
    for a in (1, 2, 57, 133, 255):
        for b in (1, 3, 99, 254):
            assert gf_mul(a, b) == gf_mul(b, a)


def test_generator_poly():
    """ecc: generator is the monic product of (x - a^i)"""
    assert rs_generator_poly(1) == [1, 1]
    assert rs_generator_poly(2) == [1, 3, 2]
    gen = rs_generator_poly(10)
    assert len(gen) == 11
    assert gen[0] == 1
    for i in range(10):
        assert gf_poly_eval(gen, GF_EXP[i]) == 0


def test_rs_encode_small_vectors():
    """ecc: hand computed parity"""
    assert rs_encode([1], 1) == [1]
    assert rs_encode([1], 2) == [3, 2]
    assert rs_encode([0, 0, 0], 4) == [0, 0, 0, 0]
    assert rs_encode([], 4) == [0, 0, 0, 0]


def test_rs_encode_deterministic():
    """ecc: same message and ecc count give the same parity"""
    message = [ord(c) for c in "Hello StripCode"]
    assert rs_encode(message, 4) == rs_encode(message, 4)
    assert rs_encode(list(message), 10) == rs_encode(tuple(message), 10)


def test_rs_encode_does_not_touch_message():
    """ecc: input message is left untouched"""
    message = [10, 20, 30, 40]
    rs_encode(message, 4)
    assert message == [10, 20, 30, 40]


def test_rs_encode_matches_reedsolo():
    """ecc: parity agrees with reedsolo's default codec"""
    rnd = random.Random(42)
    for length in (1, 4, 5, 16, 39, 40):
        message = [rnd.randrange(256) for _ in range(length)]
        ecc_count = ecc_count_for(length)
        expected = reedsolo.RSCodec(ecc_count).encode(bytearray(message))
        assert rs_encode(message, ecc_count) == list(expected[length:])


def test_codewords_vanish_at_roots():
    """ecc: data + parity evaluates to zero at every generator root"""
    rnd = random.Random(1234)
    for length in (1, 2, 7, 23, 40):
        data = [rnd.randrange(256) for _ in range(length)]
        ecc_count = ecc_count_for(length)
        codeword = data + rs_encode(data, ecc_count)
        for i in range(ecc_count):
            assert gf_poly_eval(codeword, GF_EXP[i]) == 0


def test_rs_encode_rejects_zero_ecc():
    """ecc: ecc count must be positive"""
    with pytest.raises(ValueError):
        rs_encode([1, 2, 3], 0)


def test_ecc_count_for():
    """ecc: 25% of the chunk, at least 4"""
    assert [ecc_count_for(n) for n in (1, 4, 16, 40)] == [4, 4, 4, 10]
    assert ecc_count_for(5) == 4
    assert ecc_count_for(17) == 5
    assert ecc_count_for(21) == 6
