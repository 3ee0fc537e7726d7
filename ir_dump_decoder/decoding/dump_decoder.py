"""Decode every signal of a dump, sequentially or on a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import Optional, Union

from ir_dump_decoder.models import (
    DecodeIssue,
    DecodeResult,
    DumpFile,
    ParsedSignal,
    RawSignal,
    SignalDecodeError,
)
from .protocol import DEFAULT_TIMING, ProtocolTiming

logger = logging.getLogger(__name__)

_Outcome = Union[ParsedSignal, SignalDecodeError]


def _decode_one(raw: RawSignal, timing: ProtocolTiming) -> _Outcome:
    # Module-level so process pools can pickle it
    try:
        return ParsedSignal.from_raw(raw, timing)
    except SignalDecodeError as e:
        return e


def _resolve_workers(num_workers: Optional[int]) -> int:
    if num_workers is None or num_workers == 1:
        return 1
    if num_workers == 0:
        from os import cpu_count

        return cpu_count() or 4
    if num_workers < 0:
        raise ValueError(f"num_workers must not be negative, got {num_workers}")
    return int(num_workers)


def decode_dump(
    dump: DumpFile,
    timing: Optional[ProtocolTiming] = None,
    *,
    skip_invalid: bool = False,
    num_workers: Optional[int] = None,
    use_processes: bool = False,
) -> DecodeResult:
    """Decode all signals of ``dump`` in file order.

    Concurrency:
        None or 1 -> sequential
        0         -> auto (#CPUs)
        >1        -> that many threads/processes

    Raises:
        SignalDecodeError: For the first failing signal, unless ``skip_invalid``
            is set, in which case failures are collected in ``result.errors``.
    """
    timing = timing or DEFAULT_TIMING
    workers = _resolve_workers(num_workers)
    signals = list(dump.signals)

    if workers == 1 or len(signals) <= 1:
        outcomes = [_decode_one(raw, timing) for raw in signals]
    else:
        executor_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
        logger.debug(
            "Decoding %d signals on %d %s workers",
            len(signals),
            workers,
            "process" if use_processes else "thread",
        )
        with executor_cls(max_workers=workers) as pool:
            outcomes = list(pool.map(_decode_one, signals, [timing] * len(signals)))

    result = DecodeResult()
    for outcome in outcomes:
        if isinstance(outcome, ParsedSignal):
            result.signals.append(outcome)
            continue
        if not skip_invalid:
            raise outcome
        logger.warning("Skipping undecodable signal: %s", outcome)
        result.errors.append(DecodeIssue(
            signal_name=outcome.signal_name or "",
            rule=outcome.rule,
            position=outcome.position,
            reason=str(outcome),
        ))

    return result
