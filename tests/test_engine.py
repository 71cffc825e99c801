"""
Tests for SieveEngine.filter and the pass-through accessors.

filter(n) is one marking round: it sets exactly {2n, 3n, ...} below the
length, does nothing when n is already marked, and rejects n < 2.
"""

import tracemalloc

import pytest

from bitsieve.engine import SieveEngine
from bitsieve.errors import IndexOutOfBounds, InvalidArgument, ReleasedError


def snapshot(sieve):
    return sieve.bits.to_bool_array().copy()


class TestAccessors:
    """get/set/len pass straight through to the bitset."""

    def test_new_sieve_all_candidates(self):
        sieve = SieveEngine(30)
        assert sieve.len() == 30
        assert len(sieve) == 30
        assert not any(sieve.get(i) for i in range(30))
        assert sieve.count_candidates() == 30

    def test_set_and_get(self):
        sieve = SieveEngine(10)
        sieve.set(4, True)
        assert sieve.get(4)
        assert sieve[4]
        sieve[4] = False
        assert not sieve.get(4)

    def test_bounds(self):
        sieve = SieveEngine(10)
        with pytest.raises(IndexOutOfBounds):
            sieve.get(10)
        with pytest.raises(IndexOutOfBounds):
            sieve[10] = True


class TestFilter:
    """A single marking round."""

    @pytest.mark.parametrize("length, n", [(30, 2), (30, 3), (30, 7), (100, 11), (10, 4)])
    def test_marks_exactly_proper_multiples(self, length, n):
        sieve = SieveEngine(length)
        sieve.filter(n)
        expected = [i >= 2 * n and i % n == 0 for i in range(length)]
        assert snapshot(sieve).tolist() == expected

    def test_does_not_mark_n_itself(self):
        sieve = SieveEngine(20)
        sieve.filter(5)
        assert not sieve.get(5)

    def test_other_indices_unchanged(self):
        sieve = SieveEngine(30)
        sieve.set(7, True)
        sieve.set(1, True)
        sieve.filter(3)
        assert sieve.get(7) and sieve.get(1)
        assert sieve.get(6) and sieve.get(27)
        assert not sieve.get(3)

    def test_already_marked_is_noop(self):
        """filter(n) with n marked leaves the bitset bit-for-bit unchanged."""
        sieve = SieveEngine(40)
        sieve.set(4, True)
        before = snapshot(sieve)
        sieve.filter(4)
        assert (snapshot(sieve) == before).all()

    @pytest.mark.parametrize("n", [0, 1, -3])
    def test_rejects_n_below_two(self, n):
        sieve = SieveEngine(20)
        sieve.set(5, True)
        before = snapshot(sieve)
        with pytest.raises(InvalidArgument):
            sieve.filter(n)
        assert (snapshot(sieve) == before).all()

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            SieveEngine(5).filter(1)

    @pytest.mark.parametrize("n", [5, 9, 10, 50])
    def test_n_with_no_multiples_in_range(self, n):
        """n >= length / 2 marks nothing, even when n itself is out of range."""
        sieve = SieveEngine(10)
        sieve.filter(n)
        assert sieve.count_candidates() == 10

    def test_repeat_is_stable(self):
        sieve = SieveEngine(50)
        sieve.filter(3)
        first = snapshot(sieve)
        sieve.filter(3)
        assert (snapshot(sieve) == first).all()


class TestFilterMemory:
    """A marking round works in place on the packed buffer."""

    @pytest.mark.parametrize("n", [2, 3, 7])
    def test_no_per_index_temporaries(self, n):
        sieve = SieveEngine(8_000_000)
        storage_bytes = sieve.bits.storage.nbytes

        tracemalloc.start()
        try:
            sieve.filter(n)
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert peak < storage_bytes // 4, (
            f"filter({n}) peaked at {peak:,} bytes for a {storage_bytes:,} byte sieve"
        )
        assert sieve.get(2 * n) and sieve.get(7_999_998 - 7_999_998 % n)


class TestEndToEnd:
    """Caller-driven outer loop."""

    def test_sieve_of_thirty(self):
        sieve = SieveEngine(30)
        for n in range(2, 30):
            if not sieve.get(n):
                sieve.filter(n)
        assert list(sieve) == [0, 1, 2, 3, 5, 7, 11, 13, 17, 19, 23, 29]

    def test_partial_sieve(self):
        """Stopping after n=2 leaves the odd numbers and 0, 1, 2."""
        sieve = SieveEngine(12)
        sieve.filter(2)
        assert list(sieve) == [0, 1, 2, 3, 5, 7, 9, 11]


class TestRelease:
    """Single release path, also via the context manager."""

    def test_context_manager_releases(self):
        with SieveEngine(10) as sieve:
            sieve.filter(2)
        assert sieve.released
        with pytest.raises(ReleasedError):
            sieve.get(0)

    def test_context_manager_after_explicit_release(self):
        with SieveEngine(10) as sieve:
            sieve.release()
        assert sieve.released

    def test_double_release_fails(self):
        sieve = SieveEngine(10)
        sieve.release()
        with pytest.raises(ReleasedError):
            sieve.release()

    def test_filter_after_release_fails(self):
        sieve = SieveEngine(10)
        sieve.release()
        with pytest.raises(ReleasedError):
            sieve.filter(2)
        with pytest.raises(ReleasedError):
            sieve.filter(50)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
