"""Qt application entry point for the streamwindow demo.

Parses arguments, builds the pipeline with one pyqtgraph curve per stream,
drives it from QTimers and starts the Qt event loop. ``python main.py`` and
``python -m streamwindow.gui.application`` both land in ``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Tuple

from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication

from ..config import WindowConfig
from ..core.errors import StreamWindowError
from ..core.pipeline import Pipeline
from ..core.pipeline_wiring import build_pipeline
from ..tools.cli_common import add_config_arguments, configure_logging, resolve_config
from .cadence import QtFrameCadence, QtIntervalCadence
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="streamwindow live demo")
    return add_config_arguments(parser)


def _parse_cli_args(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def create_app(qt_argv: list[str], cfg: WindowConfig) -> Tuple[QApplication, MainWindow, Pipeline]:
    """
    Create the QApplication, the main window and a pipeline feeding it.

    Raises
    ------
    GenerationError
        When the stream datasets cannot be generated.
    """
    app = QApplication.instance() or QApplication(qt_argv)
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(cfg)
    pipeline = build_pipeline(cfg, sink_factory=window.create_sink, publish=window.show_rate)
    window.attach(pipeline)
    return app, window, pipeline


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    configure_logging(args.log_level)

    try:
        cfg = resolve_config(args)
        app, window, pipeline = create_app(qt_argv, cfg)
    except StreamWindowError as exc:
        logger.error("Startup failed: %s", exc)
        raise SystemExit(1) from exc

    pipeline.start(
        QtFrameCadence(cfg.frame_rate_hz, parent=window),
        QtIntervalCadence(cfg.trim_interval_ms, parent=window),
        QtIntervalCadence(cfg.rate_interval_ms, parent=window),
    )
    app.aboutToQuit.connect(pipeline.stop)

    window.resize(1100, 650)
    window.show()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()
