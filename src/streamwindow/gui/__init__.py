"""PySide6 + pyqtgraph demo front-end for the windowing pipeline."""
