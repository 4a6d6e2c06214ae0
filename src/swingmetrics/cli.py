"""
Command-line front end.

``swingmetrics record`` runs one session against the simulated sensor
platform, standing in for the watch's START/STOP button::

    swingmetrics record --duration 10 --out ./data/forehand.csv
    swingmetrics record --config recorder.yaml          # stop with Ctrl-C
    swingmetrics record --no-gyro --allow-partial       # accelerometer only

``swingmetrics inspect`` summarizes an exported recording::

    swingmetrics inspect ./data/forehand.csv

Configuration merge: values from ``--config`` (YAML) are the defaults and
explicit command-line options override them.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

from .config.runtime import RecorderConfig, load_config
from .core.recording_session import RecordingSession
from .dataio import file_paths
from .dataio.log_loader import duration_seconds, load_recording
from .errors import ExportError
from .sensors.feed import SensorKind
from .sensors.simulated import SimulatedPlatform

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="swingmetrics", description="Accelerometer + gyroscope session recorder.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("record", help="Record one session from the simulated sensors")
    rec.add_argument("--config", type=Path, default=None, help="YAML file with recorder defaults")
    rec.add_argument("--duration", type=float, default=None, help="Seconds to record (default: until Ctrl-C)")
    rec.add_argument("--out", type=Path, default=None, help="Destination CSV (overrides output_path)")
    rec.add_argument("--session-name", type=str, default="", help="Write to a timestamped file named after the session")
    rec.add_argument("--capacity", type=int, default=None, help="Maximum rows per session")
    rec.add_argument("--interval-ms", type=int, default=None, help="Sensor polling interval in ms")
    rec.add_argument("--no-gyro", action="store_true", help="Simulate a device without a gyroscope")
    rec.add_argument("--allow-partial", action="store_true", help="Record even if a sensor is unavailable")
    rec.add_argument("--seed", type=int, default=None, help="Seed for the simulated noise")

    ins = sub.add_parser("inspect", help="Summarize an exported recording")
    ins.add_argument("path", type=Path)
    return ap


def resolve_config(args: argparse.Namespace) -> RecorderConfig:
    """Apply explicit CLI options on top of the YAML defaults."""
    cfg = load_config(args.config)
    overrides = {}
    if args.capacity is not None:
        overrides["capacity"] = args.capacity
    if args.interval_ms is not None:
        overrides["interval_ms"] = args.interval_ms
    if args.allow_partial:
        overrides["allow_partial_capture"] = True
    if args.out is not None:
        overrides["output_path"] = args.out
    elif args.session_name:
        overrides["output_path"] = file_paths.session_output_path(args.session_name)
    if not overrides:
        return cfg
    return dataclasses.replace(cfg, **overrides).sanitized()


def _record(args: argparse.Namespace) -> int:
    try:
        cfg = resolve_config(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    supported = [SensorKind.ACCELEROMETER]
    if not args.no_gyro:
        supported.append(SensorKind.GYROSCOPE)
    platform = SimulatedPlatform(supported, seed=args.seed)

    done = threading.Event()
    session = RecordingSession(platform, cfg, on_overflow=lambda kind: logger.warning("%s buffer full", kind.value))

    start_report = session.start_session()
    if start_report is None or not start_report.started:
        for channel, exc in (start_report.errors.items() if start_report else []):
            print(f"[ERROR] {channel}: {exc}", file=sys.stderr)
        return 1
    for channel, exc in start_report.errors.items():
        print(f"[WARN] {channel}: {exc}", file=sys.stderr)

    previous = signal.signal(signal.SIGINT, lambda *_: done.set())
    try:
        print(f"Recording {', '.join(start_report.active)} every {cfg.interval_ms} ms "
              f"({'Ctrl-C to stop' if args.duration is None else f'{args.duration:g} s'})")
        done.wait(args.duration)
    finally:
        signal.signal(signal.SIGINT, previous)

    try:
        stop_report = session.stop_session()
    except ExportError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    if stop_report is None:
        return 1

    print(f"Wrote {stop_report.rows_exported} rows to {stop_report.destination} "
          f"(accel={stop_report.accel_count}, gyro={stop_report.gyro_count})")
    if stop_report.overflowed:
        print(f"[WARN] buffer full on: {', '.join(stop_report.overflowed)}", file=sys.stderr)
    return 0


def _inspect(args: argparse.Namespace) -> int:
    try:
        data = load_recording(args.path)
    except (OSError, ValueError) as exc:
        print(f"[ERROR] cannot read {args.path}: {exc}", file=sys.stderr)
        return 1
    print(f"{args.path}: {data.shape[0]} rows, {duration_seconds(data):.3f} s")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "record":
        return _record(args)
    return _inspect(args)


if __name__ == "__main__":
    sys.exit(main())
