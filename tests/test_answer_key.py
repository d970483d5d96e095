"""
Tests for quizgen.generation.answer_key

Test Coverage:
- resolve_answer_index(): letters, indices, digit strings, rejections
- option_letter()
"""
import pytest

from quizgen.errors import InvalidAnswerKeyError
from quizgen.generation.answer_key import option_letter, resolve_answer_index

OPTIONS = ["x", "y", "z", "w"]


class TestResolveAnswerIndex:
    def test_letter_when_c_then_index_two(self):
        assert resolve_answer_index("C", OPTIONS) == 2

    def test_letter_when_lowercase_or_padded_then_still_resolves(self):
        assert resolve_answer_index("a", OPTIONS) == 0
        assert resolve_answer_index(" d ", OPTIONS) == 3

    def test_letter_when_beyond_options_then_raises(self):
        with pytest.raises(InvalidAnswerKeyError):
            resolve_answer_index("E", OPTIONS)

    @pytest.mark.parametrize("value, expected", [(0, 0), (3, 3), ("2", 2), (1.0, 1)])
    def test_index_when_in_range_then_returned(self, value, expected):
        assert resolve_answer_index(value, OPTIONS) == expected

    @pytest.mark.parametrize("value", [-1, 4, "7", 1.5])
    def test_index_when_out_of_range_or_fractional_then_raises(self, value):
        with pytest.raises(InvalidAnswerKeyError):
            resolve_answer_index(value, OPTIONS)

    @pytest.mark.parametrize("value", [None, True, "", "AB", "Paris", ["A"], "²", "①"])
    def test_designation_when_unrecognised_then_raises(self, value):
        with pytest.raises(InvalidAnswerKeyError):
            resolve_answer_index(value, OPTIONS)

    def test_mapping_when_options_differ_then_still_positional(self):
        """The letter refers to position, never to option content."""
        assert resolve_answer_index("B", ["A", "C", "B", "D"]) == 1


def test_option_letter():
    assert [option_letter(i) for i in range(4)] == ["A", "B", "C", "D"]
