from __future__ import annotations

import argparse
import logging

from streamwindow.tools import headless
from streamwindow.tools.cli_common import add_config_arguments, resolve_config


def _parse(*argv: str) -> argparse.Namespace:
    return add_config_arguments(argparse.ArgumentParser()).parse_args(list(argv))


def test_resolve_config_applies_overrides() -> None:
    cfg = resolve_config(
        _parse("--streams", "3", "--points-per-frame", "2", "--retention-window", "40", "--wrap-cursor")
    )
    assert cfg.streams == ["Series A", "Series B", "Series C"]
    assert cfg.points_per_frame == 2
    assert cfg.retention_window == 40
    assert cfg.wrap_cursor


def test_stream_names_continue_past_z() -> None:
    cfg = resolve_config(_parse("--streams", "28"))
    assert cfg.streams[25:] == ["Series Z", "Series AA", "Series AB"]


def test_headless_run_reports_buffers(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="streamwindow"):
        code = headless.main(
            ["--duration", "0.3", "--streams", "2", "--retention-window", "20", "--seed", "1"]
        )
    assert code == 0
    assert "Series A:" in caplog.text
    assert "Cursor stopped" in caplog.text


def test_headless_rejects_invalid_configuration(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="streamwindow"):
        code = headless.main(["--duration", "0", "--retention-window", "0"])
    assert code == 1
    assert "Startup failed" in caplog.text


def test_headless_rejects_negative_seed(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="streamwindow"):
        code = headless.main(["--duration", "0", "--seed", "-1"])
    assert code == 1
    assert "seed must be non-negative" in caplog.text
