"""Argument parsing and logging setup shared by the GUI and headless runners."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from ..config import WindowConfig, load_config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def add_config_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--config",
        type=Path,
        default=os.environ.get("STREAMWINDOW_CONFIG") or None,
        help="Optional YAML file with WindowConfig overrides (env: STREAMWINDOW_CONFIG)",
    )
    parser.add_argument(
        "--streams",
        type=int,
        help="Number of streams to create (named 'Series A', 'Series B', ...)",
    )
    parser.add_argument(
        "--points-per-frame",
        type=int,
        help="Samples appended to each stream per frame",
    )
    parser.add_argument(
        "--retention-window",
        type=int,
        help="Samples kept per stream after each trim",
    )
    parser.add_argument(
        "--unique-points",
        type=int,
        help="Length of each stream's looping dataset",
    )
    parser.add_argument(
        "--wrap-cursor",
        action="store_true",
        help="Wrap the primary-axis cursor instead of letting it grow",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the synthetic trace generator",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    return parser


def _stream_names(count: int) -> list[str]:
    names = []
    for i in range(count):
        label = ""
        n = i
        while True:
            label = chr(ord("A") + n % 26) + label
            n = n // 26 - 1
            if n < 0:
                break
        names.append(f"Series {label}")
    return names


def resolve_config(args: argparse.Namespace) -> WindowConfig:
    cfg = load_config(args.config) if args.config else WindowConfig()
    if args.streams is not None:
        cfg.streams = _stream_names(max(0, int(args.streams)))
    if args.points_per_frame is not None:
        cfg.points_per_frame = int(args.points_per_frame)
    if args.retention_window is not None:
        cfg.retention_window = int(args.retention_window)
    if args.unique_points is not None:
        cfg.unique_points = int(args.unique_points)
    if args.wrap_cursor:
        cfg.wrap_cursor = True
    if args.seed is not None:
        cfg.seed = int(args.seed)
    return cfg.sanitized()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
