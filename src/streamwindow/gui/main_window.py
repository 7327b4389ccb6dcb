"""Main window showing every stream as a scrolling pyqtgraph curve."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import pyqtgraph as pg
from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QMainWindow, QVBoxLayout, QWidget

from ..analysis.rate import DEFAULT_LABEL_TEMPLATE, RateMeter
from ..config import WindowConfig
from ..core.pipeline import Pipeline
from .plot_sink import PlotCurveSink

logger = logging.getLogger(__name__)

# Vertical distance between neighbouring z levels, in plot units.
Z_SPACING = 40.0


class MainWindow(QMainWindow):
    """Plot surface, per-stream sinks and the rate readout in the title."""

    def __init__(
        self,
        cfg: WindowConfig,
        *,
        label_template: str = DEFAULT_LABEL_TEMPLATE,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.cfg = cfg
        self.label_template = label_template
        self.pipeline: Optional[Pipeline] = None
        self.sinks: Dict[str, PlotCurveSink] = {}

        self.setWindowTitle(cfg.title)
        central = QWidget(self)
        layout = QVBoxLayout(central)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setTitle(cfg.title)
        self.plot_widget.setLabel("bottom", "Axis X")
        self.plot_widget.setLabel("left", "Axis Y")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.addLegend()
        layout.addWidget(self.plot_widget)
        self.setCentralWidget(central)

        # Progressive X axis: keep the newest retention window in view.
        self._axis_timer = QTimer(self)
        self._axis_timer.setInterval(33)
        self._axis_timer.timeout.connect(self._scroll_axis)

    def create_sink(self, name: str, index: int) -> PlotCurveSink:
        """Sink factory handed to :func:`build_pipeline`."""
        curve = self.plot_widget.plot(name=name, pen=pg.mkPen(pg.intColor(index), width=1))
        sink = PlotCurveSink(curve, z_spacing=Z_SPACING)
        self.sinks[name] = sink
        return sink

    def attach(self, pipeline: Pipeline) -> None:
        self.pipeline = pipeline
        self._axis_timer.start()

    def detach(self) -> None:
        self._axis_timer.stop()
        self.pipeline = None

    def show_rate(self, rate: float) -> None:
        label = RateMeter.format_label(rate, self.cfg.title, self.label_template)
        self.plot_widget.setTitle(label)
        self.setWindowTitle(label)

    def _scroll_axis(self) -> None:
        if self.pipeline is None:
            return
        x_end = self.pipeline.scheduler.x_pos
        self.plot_widget.setXRange(x_end - self.cfg.retention_window, x_end, padding=0)

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        if self.pipeline is not None:
            self.pipeline.stop()
        self.detach()
        super().closeEvent(event)
