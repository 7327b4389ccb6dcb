from __future__ import annotations

from typing import List, Sequence

import pytest

from streamwindow.core.dataset import CyclicDataset
from streamwindow.core.errors import InvalidConfiguration
from streamwindow.core.models import Sample, Stream
from streamwindow.core.retention import RetentionTrimmer
from streamwindow.core.scheduler import IngestionScheduler
from streamwindow.data.stream_buffer import StreamBuffer


class RecordingSink:
    def __init__(self) -> None:
        self.samples: List[Sample] = []
        self.replacements = 0

    def append(self, samples: Sequence[Sample]) -> None:
        self.samples.extend(samples)

    def replace_all(self, samples: Sequence[Sample]) -> None:
        self.replacements += 1
        self.samples = list(samples)


class ManualIntervalCadence:
    def __init__(self) -> None:
        self.callback = None
        self.stopped = False

    def start(self, callback) -> None:
        self.callback = callback

    def stop(self) -> None:
        self.stopped = True
        self.callback = None


def _streams(count: int, dataset_length: int = 10) -> List[Stream]:
    dataset = [[float(i), 0.0] for i in range(dataset_length)]
    return [
        Stream(name=f"s{i}", dataset=CyclicDataset(dataset), buffer=StreamBuffer(), sink=RecordingSink())
        for i in range(count)
    ]


def test_trim_retains_the_newest_window_and_repopulates_sink() -> None:
    streams = _streams(2)
    scheduler = IngestionScheduler(streams, batch_size=7)
    for _ in range(5):
        scheduler.tick()

    removed = RetentionTrimmer(streams, retention_window=20).trim()

    assert removed == {"s0": 15, "s1": 15}
    for stream in streams:
        assert stream.buffer.indices() == list(range(15, 35))
        assert stream.sink.samples == stream.buffer.snapshot()
        assert stream.sink.replacements == 1


def test_short_buffers_are_left_alone() -> None:
    streams = _streams(1)
    IngestionScheduler(streams, batch_size=3).tick()
    trimmer = RetentionTrimmer(streams, retention_window=20)
    assert trimmer.trim() == {}
    assert len(streams[0].buffer) == 3
    assert streams[0].sink.replacements == 0


@pytest.mark.parametrize("window", [1, 5, 20, 35, 50])
def test_length_after_trim(window: int) -> None:
    streams = _streams(1)
    scheduler = IngestionScheduler(streams, batch_size=7)
    for _ in range(5):
        scheduler.tick()
    before = len(streams[0].buffer)

    RetentionTrimmer(streams, retention_window=window).trim()

    after = len(streams[0].buffer)
    assert after <= max(window, before)
    if before >= window:
        assert after == window
        assert streams[0].buffer.indices() == list(range(before - window, before))


def test_second_trim_without_appends_changes_nothing() -> None:
    streams = _streams(1)
    scheduler = IngestionScheduler(streams, batch_size=9)
    for _ in range(4):
        scheduler.tick()
    trimmer = RetentionTrimmer(streams, retention_window=10)
    trimmer.trim()
    first = streams[0].buffer.snapshot()
    assert trimmer.trim() == {"s0": 0}
    assert streams[0].buffer.snapshot() == first


def test_trim_window_override() -> None:
    streams = _streams(1)
    IngestionScheduler(streams, batch_size=30).tick()
    trimmer = RetentionTrimmer(streams, retention_window=20)
    trimmer.trim(retention_window=5)
    assert streams[0].buffer.indices() == [25, 26, 27, 28, 29]


def test_invalid_window_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        RetentionTrimmer(_streams(1), retention_window=0)
    with pytest.raises(InvalidConfiguration):
        RetentionTrimmer(_streams(1), retention_window=5).trim(retention_window=-1)


def test_start_and_stop_drive_the_interval_cadence() -> None:
    streams = _streams(1)
    IngestionScheduler(streams, batch_size=12).tick()
    trimmer = RetentionTrimmer(streams, retention_window=4)
    cadence = ManualIntervalCadence()

    trimmer.start(cadence)
    cadence.callback()
    assert len(streams[0].buffer) == 4

    trimmer.stop()
    assert cadence.stopped
