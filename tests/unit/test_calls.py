"""
Unit tests for symbolic calls.
"""

import pytest


@pytest.mark.unit
class TestSymbolicCall:
    """Tests for SymbolicCall construction and comparison."""

    def test_build_drops_none(self):
        from tscore.calls import Operation, SymbolicCall
        call = SymbolicCall.build(Operation.SPAN, start="2020", end=None)
        assert call.kwargs == {"start": "2020"}, "Unset bounds are omitted"

    def test_args_sorted(self):
        from tscore.calls import Operation, SymbolicCall
        call = SymbolicCall.build(Operation.FREQUENCY, to="year", aggregate="sum", na_rm=True)
        assert [name for name, _ in call.args] == ["aggregate", "na_rm", "to"]

    def test_missing_argument(self):
        from tscore.calls import Operation, SymbolicCall
        from tscore.errors import InvalidOptionError
        with pytest.raises(InvalidOptionError):
            SymbolicCall.build(Operation.LAG)

    def test_unknown_argument(self):
        from tscore.calls import Operation, SymbolicCall
        from tscore.errors import InvalidOptionError
        with pytest.raises(InvalidOptionError):
            SymbolicCall.build(Operation.PC, by=1)

    def test_duplicate_argument(self):
        from tscore.calls import Operation, SymbolicCall
        from tscore.errors import InvalidOptionError
        with pytest.raises(InvalidOptionError):
            SymbolicCall(Operation.LAG, (("by", 1), ("by", 2)))

    def test_structural_equality(self):
        from tscore.calls import Operation, SymbolicCall
        first = SymbolicCall.build(Operation.PICK, series=["a", "b"])
        second = SymbolicCall.build(Operation.PICK, series=["a", "b"])
        assert first == second
        assert hash(first) == hash(second), "Calls are hashable"
        assert first.kwargs["series"] == ("a", "b"), "Lists are frozen to tuples"

    def test_str(self):
        from tscore.calls import Operation, SymbolicCall
        assert str(SymbolicCall.build(Operation.LAG, by=2)) == "lag(by=2)"
        assert str(SymbolicCall.build(Operation.PC)) == "pc()"

    def test_frozen(self):
        import dataclasses
        from tscore.calls import Operation, SymbolicCall
        call = SymbolicCall.build(Operation.PC)
        with pytest.raises(dataclasses.FrozenInstanceError):
            call.operation = Operation.DIFF


@pytest.mark.unit
class TestOperation:
    """Tests for the Operation enum."""

    def test_every_operation_has_signature(self):
        from tscore.calls import SIGNATURES, Operation
        assert set(SIGNATURES) == set(Operation)

    def test_only_load_is_source(self):
        from tscore.calls import Operation
        assert [op for op in Operation if op.is_source] == [Operation.LOAD_DATASET]
