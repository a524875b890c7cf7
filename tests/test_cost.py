import pytest
from hypothesis import given
from hypothesis import strategies as st

from evmkit.precompile.cost import calc_linear_cost_u32


def test_empty_input_costs_base():
    assert calc_linear_cost_u32(0, 60, 12) == 60


@pytest.mark.parametrize("words", [1, 2, 5, 100])
def test_whole_words(words):
    assert calc_linear_cost_u32(32 * words, 0, 1) == words


@pytest.mark.parametrize("words", [1, 3, 10])
def test_partial_word_rounds_up(words):
    assert calc_linear_cost_u32(32 * words - 31, 0, 1) == words
    assert calc_linear_cost_u32(32 * words + 1, 0, 1) == words + 1


@given(st.integers(0, 10**6), st.integers(0, 10**4), st.integers(0, 10**4))
def test_base_is_additive(length, base, word):
    assert calc_linear_cost_u32(length, base, word) == (
        calc_linear_cost_u32(length, 0, word) + base
    )


@given(st.integers(0, 10**6))
def test_word_count_covers_length(length):
    words = calc_linear_cost_u32(length, 0, 1)
    assert 32 * words >= length
    assert 32 * words < length + 32