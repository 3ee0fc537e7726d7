"""Command line entry point: export IR dumps as CSV or timeline images."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

import yaml

from ir_dump_decoder import __version__
from ir_dump_decoder.config_loader import load_config
from ir_dump_decoder.decoding import decode_dump
from ir_dump_decoder.models import DumpFile, DumpFormatError, ParsedSignal, SignalDecodeError
from ir_dump_decoder.parsers import parser_registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DECODE_FAILED = 1
EXIT_USAGE = 2


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ir-dump",
        description="Decode raw IR signal dumps into packets.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file overriding protocol timing and plot settings.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    csv_cmd = sub.add_parser("csv", help="Decode every signal and write one CSV row per signal.")
    csv_cmd.add_argument("-f", "--file", type=Path, required=True, help="The file to read the IR signals from.")
    csv_cmd.add_argument("-o", "--output-file", type=Path, required=True, help="The output CSV file.")
    csv_cmd.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip signals that fail to decode instead of aborting.",
    )
    csv_cmd.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Decode on N workers (0 = one per CPU). Default: sequential.",
    )
    csv_cmd.add_argument("--processes", action="store_true", help="Use processes instead of threads.")

    plot_cmd = sub.add_parser("plot", help="Write one PNG timeline per signal.")
    plot_cmd.add_argument("-f", "--file", type=Path, required=True, help="The file to read the IR signals from.")
    plot_cmd.add_argument("-o", "--output-dir", type=Path, required=True, help="Directory for the images.")
    plot_cmd.add_argument(
        "--decode",
        action="store_true",
        help="Also decode each signal, print its packets and list them on the image.",
    )
    plot_cmd.add_argument(
        "--skip-invalid",
        action="store_true",
        help="With --decode: plot undecodable signals without packets instead of aborting.",
    )

    return parser.parse_args(argv)


def _read_dump(path: Path) -> DumpFile:
    dump = parser_registry.parse(path)
    logger.debug("Parsed %d signal(s) from %s (version %d)", len(dump), path, dump.version)
    return dump


def run_csv(args: argparse.Namespace, timing) -> int:
    from ir_dump_decoder.export import write_csv

    dump = _read_dump(args.file)
    result = decode_dump(
        dump,
        timing,
        skip_invalid=args.skip_invalid,
        num_workers=args.workers,
        use_processes=args.processes,
    )
    write_csv(result.signals, args.output_file)
    if result.has_errors:
        logger.warning("Skipped %d of %d signal(s)", result.error_count, len(dump))
    return EXIT_OK


def run_plot(args: argparse.Namespace, timing, settings) -> int:
    from ir_dump_decoder.export.plotting import TimelineRenderer

    dump = _read_dump(args.file)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    renderer = TimelineRenderer(settings)

    for raw in dump:
        logger.debug(
            "Plotting %s: %d durations, %d us",
            raw.name, raw.duration_count, raw.total_duration,
        )
        packets = None
        if args.decode:
            try:
                packets = ParsedSignal.from_raw(raw, timing).packets
            except SignalDecodeError as e:
                if not args.skip_invalid:
                    raise
                logger.warning("Plotting without packets: %s", e)
            else:
                for packet in packets:
                    print(f"{raw.name}: {packet}")
        renderer.save(raw, args.output_dir, packets)

    return EXIT_OK


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        timing, settings = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Invalid config: %s", e)
        return EXIT_USAGE

    if not args.file.exists():
        logger.error("Dump file not found: %s", args.file)
        return EXIT_USAGE

    try:
        if args.command == "csv":
            return run_csv(args, timing)
        return run_plot(args, timing, settings)
    except DumpFormatError as e:
        logger.error("Failed decoding dump: %s", e)
        return EXIT_DECODE_FAILED
    except SignalDecodeError as e:
        logger.error("Failed to parse signal: %s", e)
        return EXIT_DECODE_FAILED
    except OSError as e:
        logger.error("%s", e)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
