"""
Record Stream Module

Reads transaction records from delimited text (header ``type,client,tx,amount``)
and yields them in file order as typed TransactionRecord objects.

Malformed rows are dropped here and never reach the ledger. They are only
visible in DEBUG logs.
"""

import csv
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

from .amounts import parse_amount
from .transactions import TransactionRecord, TransactionType
from .logging_config import get_logger, log_action


logger = get_logger("payment_engine.records")


def _parse_int(value: Optional[str]) -> int:
    if value is None:
        raise ValueError("missing field")
    text = value.strip()
    # int() would also take signs, underscores and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid integer '{value}'")
    return int(text)


def parse_row(row: Dict[str, Optional[str]]) -> Optional[TransactionRecord]:
    """
    Build a record from one CSV row

    Args:
        row: Mapping of (trimmed) header names to raw field text

    Returns:
        TransactionRecord, or None if the row is malformed
    """
    try:
        transaction_type = TransactionType.parse(row.get("type") or "")
        client = _parse_int(row.get("client"))
        tx = _parse_int(row.get("tx"))

        amount = None
        if transaction_type.carries_amount:
            amount = parse_amount(row.get("amount") or "")

        return TransactionRecord(
            transaction_type=transaction_type,
            client=client,
            tx=tx,
            amount=amount,
        )
    except ValueError as e:
        log_action(
            logger, "debug", f"Dropping malformed row: {e}",
            action="drop_row", extra={"row": row}
        )
        return None


def iter_records(lines: Iterable[str]) -> Iterator[TransactionRecord]:
    """
    Parse records from an iterable of CSV lines, header first

    Args:
        lines: Text lines, e.g. an open file

    Yields:
        Well-formed TransactionRecord objects in input order
    """
    reader = csv.reader(lines)
    header = next(reader, None)
    if header is None:
        return
    fieldnames = [name.strip().lstrip("\ufeff").strip().lower() for name in header]

    for values in reader:
        if not values or all(not value.strip() for value in values):
            continue
        row = {
            name: value.strip()
            for name, value in zip(fieldnames, values)
        }
        record = parse_row(row)
        if record is not None:
            yield record


def read_records(path: Union[str, Path]) -> Iterator[TransactionRecord]:
    """
    Stream records from a CSV file

    The file is opened before the first record is requested, so a missing or
    unreadable file raises immediately. It is closed once the iterator is
    exhausted or closed after iteration has started; an iterator that is never
    advanced leaves the handle to garbage collection, so callers should
    consume what they open. A leading UTF-8 byte-order mark is skipped.

    Args:
        path: Path of the input file

    Returns:
        Iterator of TransactionRecord objects in file order

    Raises:
        OSError: If the file cannot be opened
    """
    handle = open(path, newline="", encoding="utf-8-sig")
    return _stream(handle)


def _stream(handle) -> Iterator[TransactionRecord]:
    with handle:
        yield from iter_records(handle)
