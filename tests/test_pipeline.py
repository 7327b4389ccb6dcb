from __future__ import annotations

import asyncio
import threading
import time
from typing import List, Sequence

import numpy as np
import pytest

from streamwindow.config import WindowConfig
from streamwindow.core.cadence import ThreadedFrameCadence, ThreadedIntervalCadence
from streamwindow.core.errors import GenerationError
from streamwindow.core.models import Sample
from streamwindow.core.pipeline_wiring import build_pipeline, build_streams


class RecordingSink:
    def __init__(self) -> None:
        self.samples: List[Sample] = []

    def append(self, samples: Sequence[Sample]) -> None:
        self.samples.extend(samples)

    def replace_all(self, samples: Sequence[Sample]) -> None:
        self.samples = list(samples)


class FlakyGenerator:
    """Fails on the listed call numbers (0-based), otherwise returns a ramp."""

    def __init__(self, fail_on: Sequence[int] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls = 0

    async def generate(self, count: int) -> np.ndarray:
        call = self.calls
        self.calls += 1
        if call in self.fail_on:
            raise GenerationError("generator exhausted")
        x = np.arange(count, dtype=np.float64)
        return np.column_stack((x, np.sin(x)))


class ManualFrameCadence:
    def __init__(self) -> None:
        self.pending = None

    def request(self, callback) -> None:
        self.pending = callback

    def cancel(self) -> None:
        self.pending = None

    def fire(self) -> None:
        callback, self.pending = self.pending, None
        callback()


class ManualIntervalCadence:
    def __init__(self) -> None:
        self.callback = None

    def start(self, callback) -> None:
        self.callback = callback

    def stop(self) -> None:
        self.callback = None


def _scenario_config(**overrides) -> WindowConfig:
    cfg = WindowConfig(
        streams=[f"Series {c}" for c in "ABCDE"],
        unique_points=2500,
        points_per_frame=5,
        retention_window=1000,
    )
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return cfg


def test_five_stream_scenario_converges_to_retention_window() -> None:
    sinks = {}

    def sink_factory(name: str, index: int) -> RecordingSink:
        sinks[name] = RecordingSink()
        return sinks[name]

    pipeline = build_pipeline(_scenario_config(seed=7), sink_factory=sink_factory)
    assert all(len(stream.dataset) == 2498 for stream in pipeline.streams)

    for _ in range(1000):
        pipeline.scheduler.tick()
    assert pipeline.scheduler.x_pos == 5000
    assert set(pipeline.buffer_lengths().values()) == {5000}

    pipeline.trimmer.trim()

    expected = list(range(4000, 5000))
    for stream in pipeline.streams:
        assert stream.buffer.indices() == expected
        assert sinks[stream.name].samples == stream.buffer.snapshot()


def test_streams_keep_configuration_order_and_z_levels() -> None:
    streams = asyncio.run(build_streams(_scenario_config(), generator=FlakyGenerator()))
    assert [s.name for s in streams] == [f"Series {c}" for c in "ABCDE"]
    assert [s.dataset[0][1] for s in streams] == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_generation_failure_aborts_startup_by_default() -> None:
    with pytest.raises(GenerationError) as excinfo:
        build_pipeline(_scenario_config(), generator=FlakyGenerator(fail_on=[2]))
    assert excinfo.value.stream == "Series C"


def test_exclude_policy_drops_failed_streams() -> None:
    cfg = _scenario_config(on_generation_error="exclude")
    pipeline = build_pipeline(cfg, generator=FlakyGenerator(fail_on=[1, 3]))
    assert pipeline.stream_names() == ["Series A", "Series C", "Series E"]
    pipeline.scheduler.tick()
    assert set(pipeline.buffer_lengths().values()) == {5}


def test_exclude_policy_still_fails_when_every_stream_fails() -> None:
    cfg = _scenario_config(on_generation_error="exclude", streams=["only"])
    with pytest.raises(GenerationError):
        build_pipeline(cfg, generator=FlakyGenerator(fail_on=[0]))


def test_start_drives_all_tasks_and_stop_cancels_them() -> None:
    clock = {"now": 0.0}
    published = []
    pipeline = build_pipeline(
        _scenario_config(streams=["a", "b"], retention_window=12),
        generator=FlakyGenerator(),
        publish=published.append,
        clock=lambda: clock["now"],
    )
    frames = ManualFrameCadence()
    trim = ManualIntervalCadence()
    rate = ManualIntervalCadence()
    reset = ManualIntervalCadence()

    pipeline.start(frames, trim, rate, reset)
    assert pipeline.running
    for _ in range(4):
        frames.fire()
    clock["now"] = 1000.0
    rate.callback()
    trim.callback()

    assert published == [pytest.approx(40.0)]
    assert pipeline.buffer_lengths() == {"a": 12, "b": 12}

    reset.callback()
    assert pipeline.scheduler.accumulator.sample_count == 0

    pipeline.stop()
    assert not pipeline.running
    assert frames.pending is None
    assert trim.callback is None and rate.callback is None and reset.callback is None


def test_snapshot_and_lookup() -> None:
    pipeline = build_pipeline(_scenario_config(streams=["a"]), generator=FlakyGenerator())
    pipeline.scheduler.tick()
    assert [s.index for s in pipeline.snapshot()["a"]] == [0, 1, 2, 3, 4]
    assert pipeline.stream("a").name == "a"
    with pytest.raises(KeyError):
        pipeline.stream("missing")


def test_threaded_cadences_run_and_stop() -> None:
    pipeline = build_pipeline(
        _scenario_config(streams=["a", "b"], retention_window=50),
        generator=FlakyGenerator(),
    )
    frames = ThreadedFrameCadence(200.0)
    trim = ThreadedIntervalCadence(20.0)
    rate = ThreadedIntervalCadence(20.0)
    pipeline.start(frames, trim, rate)

    deadline = time.time() + 2.0
    while time.time() < deadline and pipeline.scheduler.x_pos < 100:
        time.sleep(0.01)
    pipeline.stop()

    assert pipeline.scheduler.x_pos >= 100
    assert not frames.is_alive()
    assert not trim.is_alive()
    for stream in pipeline.streams:
        indices = stream.buffer.indices()
        assert indices == list(range(indices[0], indices[0] + len(indices)))
        assert indices[-1] == pipeline.scheduler.x_pos - 1


def test_threaded_interval_cadence_repeats() -> None:
    calls = []
    done = threading.Event()

    def callback() -> None:
        calls.append(1)
        if len(calls) >= 3:
            done.set()

    cadence = ThreadedIntervalCadence(10.0)
    cadence.start(callback)
    assert done.wait(2.0)
    cadence.stop()
    assert len(calls) >= 3
