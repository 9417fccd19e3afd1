import sys

import pytest

from mqfilters.bitset import BitSet
from mqfilters.errors import QueryFilterError


class TestBitSet:
    def test_starts_empty(self) -> None:
        bits = BitSet(100)
        assert len(bits) == 100
        assert bits.population_count() == 0
        assert not any(bits.test(i) for i in range(100))
        assert len(bits.bit_array) == 13

    def test_set_and_test(self) -> None:
        bits = BitSet(20)
        assert bits.set(0) is True
        assert bits.set(9) is True
        assert bits.set(19) is True
        assert [i for i in range(20) if bits.test(i)] == [0, 9, 19]
        # bit 9 is byte 1, mask 1 << 1
        assert bits.bit_array[1] == 0b10

    def test_set_is_idempotent(self) -> None:
        bits = BitSet(8)
        assert bits.set(3) is True
        assert bits.set(3) is False
        assert bits.population_count() == 1

    def test_clear_all(self) -> None:
        bits = BitSet(64)
        for i in range(0, 64, 3):
            bits.set(i)
        bits.clear_all()
        assert bits.population_count() == 0
        assert bytes(bits.bit_array) == bytes(8)
        assert bits.set(3) is True

    def test_population_count_matches_bits(self) -> None:
        bits = BitSet(1000)
        for i in range(0, 1000, 7):
            bits.set(i)
        expected = sum(bin(b).count("1") for b in bits.bit_array)
        assert bits.population_count() == expected == len(range(0, 1000, 7))

    @pytest.mark.parametrize("index", [-1, 10, 11])
    def test_out_of_range(self, index) -> None:
        bits = BitSet(10)
        with pytest.raises(IndexError):
            bits.set(index)
        with pytest.raises(IndexError):
            bits.test(index)

    @pytest.mark.parametrize("size", [0, -8, 2.0, True])
    def test_invalid_size(self, size) -> None:
        with pytest.raises(QueryFilterError):
            BitSet(size)

    def test_size_beyond_addressable_range(self) -> None:
        with pytest.raises(QueryFilterError, match="at most"):
            BitSet(sys.maxsize + 1)

    def test_bit_array_is_read_only(self) -> None:
        bits = BitSet(8)
        with pytest.raises(TypeError):
            bits.bit_array[0] = 1
