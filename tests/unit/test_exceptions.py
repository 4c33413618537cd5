"""Tests for the error taxonomy."""

from app.utils.exceptions import (
    AlreadyPlacedError,
    ErrorKind,
    InvalidPositionError,
    NodeNotFoundError,
    SlotOccupiedError,
    WindowNotClosedError,
    is_recoverable,
)


class TestErrorTaxonomy:
    """Tests for error kinds and reasons."""

    def test_kinds(self) -> None:
        assert NodeNotFoundError.kind is ErrorKind.NOT_FOUND
        assert InvalidPositionError.kind is ErrorKind.INVALID_INPUT
        assert SlotOccupiedError.kind is ErrorKind.CONFLICT
        assert AlreadyPlacedError.kind is ErrorKind.CONFLICT
        assert WindowNotClosedError.kind is ErrorKind.PRECONDITION_FAILED

    def test_conflicts_are_distinguishable(self) -> None:
        """Callers can tell 'slot already filled' from 'already placed'."""
        assert SlotOccupiedError().reason != AlreadyPlacedError().reason
        assert str(SlotOccupiedError()) == "slot already filled"

    def test_to_dict_carries_context(self) -> None:
        error = SlotOccupiedError("left slot of U1 is already filled", parent_id="U1")

        assert error.to_dict() == {
            "kind": "conflict",
            "reason": "slot already filled",
            "message": "left slot of U1 is already filled",
            "parent_id": "U1",
        }

    def test_categories(self) -> None:
        assert is_recoverable(NodeNotFoundError())
        assert not is_recoverable(RuntimeError())
        assert not is_recoverable(ValueError())
