"""CSV export of decoded signals.

One row per signal: the name, then one column per packet holding its bit
string. Rows have different widths.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import IO, Iterable, Union

from ir_dump_decoder.models import ParsedSignal

logger = logging.getLogger(__name__)


def signal_to_row(signal: ParsedSignal) -> list[str]:
    return [signal.name, *(str(packet) for packet in signal.packets)]


def write_rows(signals: Iterable[ParsedSignal], stream: IO[str]) -> int:
    """Write one row per signal to an open text stream; returns the row count."""
    writer = csv.writer(stream, lineterminator="\n")
    count = 0
    for signal in signals:
        writer.writerow(signal_to_row(signal))
        count += 1
    return count


def write_csv(signals: Iterable[ParsedSignal], path: Union[str, Path]) -> int:
    """Write the CSV file, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="", encoding="utf-8") as f:
        count = write_rows(signals, f)

    logger.info("Wrote %d row(s) to %s", count, path)
    return count
