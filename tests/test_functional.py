import pytest

from budget_core.functional import Either, Left, Maybe, Nothing, Right, Some


def test_maybe_map():
    doubled = Some(5).map(lambda x: x * 2)
    assert doubled.is_some()
    assert doubled.get_or_else(0) == 10

    mapped_nothing = Nothing().map(lambda x: x * 2)
    assert mapped_nothing.is_none()
    assert mapped_nothing.get_or_else(0) == 0


def test_maybe_bind():
    def safe_divide(x: int) -> Maybe[int]:
        if x == 0:
            return Nothing()
        return Some(10 // x)

    assert Some(2).bind(safe_divide) == Some(5)
    assert Some(0).bind(safe_divide).is_none()
    assert Nothing().bind(safe_divide).is_none()


def test_either_map_and_bind():
    def safe_divide(x: int) -> Either[str, int]:
        if x == 0:
            return Left("Division by zero")
        return Right(10 // x)

    assert Right(5).map(lambda x: x * 2).get_or_else(0) == 10
    assert Right(2).bind(safe_divide) == Right(5)

    error = Right(0).bind(safe_divide)
    assert error.is_left()
    assert error.get_error() == "Division by zero"

    left = Left("original").map(lambda x: x * 2)
    assert left.get_or_else(0) == 0
    assert left.bind(safe_divide).get_error() == "original"


def test_right_has_no_error():
    with pytest.raises(ValueError):
        Right(1).get_error()
