"""Exporters for decoded signals.

The image exporter pulls in PySide6; import it from
``ir_dump_decoder.export.plotting`` when needed.
"""

from .csv_export import signal_to_row, write_rows, write_csv

__all__ = [
    "signal_to_row",
    "write_rows",
    "write_csv",
]
