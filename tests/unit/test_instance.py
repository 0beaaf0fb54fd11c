"""
Unit tests for block instances.
"""

import pandas as pd
import pytest


def _lag(**options):
    from tscore.instance import BlockInstance
    from tsblocks.lag import TsLagBlock
    return BlockInstance(TsLagBlock(), options, name="lag")


@pytest.mark.unit
class TestRun:
    """Tests for run and receive."""

    def test_run_publishes(self, monthly_frame):
        instance = _lag()
        received = []
        instance.on_output(lambda frame, generation: received.append((frame, generation)))
        result = instance.run(monthly_frame)
        assert len(received) == 1
        assert received[0][0] is result
        assert received[0][1] == 1
        assert str(instance.call) == "lag(by=1)"

    def test_generation_increases(self, monthly_frame):
        instance = _lag()
        instance.run(monthly_frame)
        instance.run(monthly_frame)
        assert instance.generation == 2

    def test_no_upstream_yields_none(self):
        instance = _lag()
        received = []
        instance.on_output(lambda frame, generation: received.append(frame))
        assert instance.run(None) is None
        assert received == [None]
        assert instance.call is None, "Nothing is evaluated without data"

    def test_source_runs_without_upstream(self):
        from tscore.instance import BlockInstance
        from tsblocks.airpassenger import TsAirPassengerBlock
        result = BlockInstance(TsAirPassengerBlock()).run()
        assert len(result) == 144

    def test_run_raises(self, multi_frame):
        from tscore.errors import ShapeValidationError
        from tscore.instance import BlockInstance
        from tsblocks.select import TsSelectBlock
        instance = BlockInstance(TsSelectBlock(), {"series": ["zzz"]}, name="pick")
        with pytest.raises(ShapeValidationError) as excinfo:
            instance.run(multi_frame)
        assert excinfo.value.block == "pick", "Errors carry the instance name"

    def test_receive_records_error(self, wide_frame):
        from tscore.errors import ShapeValidationError
        instance = _lag()
        received = []
        instance.on_output(lambda frame, generation: received.append(frame))
        assert instance.receive(wide_frame) is None
        assert isinstance(instance.error, ShapeValidationError)
        assert received == [None]
        assert instance.output is None

    def test_success_clears_error(self, wide_frame, monthly_frame):
        instance = _lag()
        instance.receive(wide_frame)
        instance.receive(monthly_frame)
        assert instance.error is None

    def test_unsubscribe(self, monthly_frame):
        instance = _lag()
        received = []
        unsubscribe = instance.on_output(lambda frame, generation: received.append(frame))
        unsubscribe()
        instance.run(monthly_frame)
        assert received == []


@pytest.mark.unit
class TestReactivity:
    """Tests for recomputation after option changes."""

    def test_option_change_reruns(self, monthly_frame):
        instance = _lag()
        instance.run(monthly_frame)
        instance.set_option("by", 2)
        assert instance.generation == 2
        assert instance.output["time"].iloc[0] == pd.Timestamp("2020-03-01")

    def test_no_rerun_before_first_run(self):
        instance = _lag()
        instance.set_option("by", 2)
        assert instance.generation == 0

    def test_rejected_change_keeps_output(self, monthly_frame):
        from tscore.errors import InvalidOptionError
        instance = _lag()
        instance.run(monthly_frame)
        with pytest.raises(InvalidOptionError):
            instance.set_option("by", 5000)
        assert instance.get("by") == 1
        assert instance.generation == 1

    def test_batch_reruns_once(self, monthly_frame):
        from tscore.instance import BlockInstance
        from tsblocks.frequency import TsFrequencyBlock
        instance = BlockInstance(TsFrequencyBlock())
        instance.run(monthly_frame)
        instance.update(to="quarter", aggregate="sum")
        assert instance.generation == 2
        assert len(instance.output) == 8

    def test_invalid_span_rejected(self, monthly_frame):
        from tscore.errors import InvalidOptionError
        from tscore.instance import BlockInstance
        from tsblocks.span import TsSpanBlock
        instance = BlockInstance(TsSpanBlock())
        instance.run(monthly_frame)
        with pytest.raises(InvalidOptionError):
            instance.update(start="2021-06", end="2020-01")
        assert instance.get("start") is None and instance.get("end") is None


@pytest.mark.unit
class TestProbeConstraints:
    """Tests for option domains narrowed by upstream data."""

    def test_frequency_resets_finer_target(self, monthly_frame):
        from tscore.instance import BlockInstance
        from tsblocks.frequency import TsFrequencyBlock
        instance = BlockInstance(TsFrequencyBlock(), {"to": "day"})
        instance.run(monthly_frame)
        assert instance.get("to") == "year"
        assert instance.state.choices("to") == ["year", "quarter", "month"]

    def test_frequency_rejects_finer_target_after_probe(self, monthly_frame):
        from tscore.errors import InvalidOptionError
        from tscore.instance import BlockInstance
        from tsblocks.frequency import TsFrequencyBlock
        instance = BlockInstance(TsFrequencyBlock())
        instance.run(monthly_frame)
        with pytest.raises(InvalidOptionError):
            instance.set_option("to", "week")

    def test_constraint_lifted_without_data(self, monthly_frame):
        from tscore.instance import BlockInstance
        from tsblocks.frequency import TsFrequencyBlock
        instance = BlockInstance(TsFrequencyBlock())
        instance.run(monthly_frame)
        instance.run(None)
        assert "day" in instance.state.choices("to")

    def test_select_offers_upstream_series(self, multi_frame):
        from tscore.errors import InvalidOptionError
        from tscore.instance import BlockInstance
        from tsblocks.select import TsSelectBlock
        instance = BlockInstance(TsSelectBlock())
        instance.run(multi_frame)
        assert instance.state.choices("series") == ["a", "b", "c"]
        instance.set_option("series", ["c"])
        assert set(instance.output["id"]) == {"c"}
        with pytest.raises(InvalidOptionError):
            instance.set_option("series", ["d"])

    def test_decompose_method_switch_moves_component(self):
        from tscore.instance import BlockInstance
        from tsblocks.decompose import TsDecomposeBlock
        instance = BlockInstance(TsDecomposeBlock())
        assert instance.get("component") == "seasonal_adjusted"
        instance.set_option("method", "hp_filter")
        assert instance.get("method") == "hp_filter"
        assert instance.get("component") == "trend"
        instance.set_option("component", "seasonal")
        assert instance.get("component") == "trend", "hp_filter has no seasonal component"
        instance.set_option("method", "stl")
        instance.set_option("component", "seasonal")
        assert instance.get("component") == "seasonal"


@pytest.mark.unit
class TestInstanceMisc:
    """Tests for configuration and call checks."""

    def test_config_read_only(self):
        instance = _lag(by=2)
        with pytest.raises(TypeError):
            instance.config["by"] = 3

    def test_describe(self):
        assert _lag(by=-1).describe() == "Shifting data backward by 1 period (lead)"

    def test_call_outside_menu(self, monthly_frame):
        from tscore.calls import Operation, SymbolicCall
        from tscore.errors import InvalidOptionError
        from tscore.instance import BlockInstance
        from tsblocks.lag import TsLagBlock

        class RogueLag(TsLagBlock):
            def build_call(self, state, probe=None):
                return SymbolicCall.build(Operation.PC)

        instance = BlockInstance(RogueLag())
        with pytest.raises(InvalidOptionError):
            instance.run(monthly_frame)
