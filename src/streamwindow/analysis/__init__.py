"""Ingestion instrumentation.

:mod:`rate` stays free of Qt and timer code so the same meter can be driven
by the GUI, the headless runner, or tests with a fake clock.
"""
