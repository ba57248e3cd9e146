import pytest

from stagechain import Chain
from stagechain.stages import TimingStage
from stagechain.telemetry import InMemoryTelemetry, TelemetryPort

LABELS = (("chain", "post_process"),)


def test_timing_stage_records_invocation_and_duration() -> None:
    telemetry = InMemoryTelemetry()
    chain = Chain(lambda c: c.add(TimingStage, telemetry, name="post_process"))

    result = chain.invoke({"id": 1}, final_action=lambda: "stored")

    assert result == "stored"
    assert telemetry.get_counter("stagechain_invocations_total", LABELS) == 1
    assert telemetry.get_counter("stagechain_errors_total", LABELS) == 0
    durations = telemetry.get_timing_values("stagechain_duration_seconds", LABELS)
    assert len(durations) == 1
    assert durations[0] >= 0


def test_timing_stage_counts_errors_and_reraises() -> None:
    telemetry = InMemoryTelemetry()
    chain = Chain(lambda c: c.add(TimingStage, telemetry, name="post_process"))

    def fail() -> None:
        raise RuntimeError("store failed")

    with pytest.raises(RuntimeError):
        chain.invoke({"id": 1}, final_action=fail)

    assert telemetry.get_counter("stagechain_errors_total", LABELS) == 1
    assert len(telemetry.get_timing_values("stagechain_duration_seconds", LABELS)) == 1


def test_in_memory_telemetry_satisfies_port_and_resets() -> None:
    telemetry = InMemoryTelemetry()
    telemetry.incr("x")
    telemetry.timing("y", 0.5)

    assert isinstance(telemetry, TelemetryPort)
    assert telemetry.get_counter("x") == 1

    telemetry.reset()
    assert telemetry.get_counter("x") == 0
    assert telemetry.get_timing_values("y") == []
