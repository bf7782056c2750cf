"""Statement reading and row normalization.

Rows that cannot become a transaction are not errors: summary lines,
blank payees and unparseable dates or amounts are reported through a
RowOutcome so the caller can count them.
"""

import csv
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Optional

from finimport.domain.entities import InstitutionConfig, RowOutcome, TransactionCandidate
from finimport.utils.amount_parser import parse_amount
from finimport.utils.date_parser import parse_date

_SURROUNDING_QUOTES = re.compile(r'^"|"$')


@dataclass(frozen=True)
class NormalizedRow:
    """Outcome of normalizing one row, with the candidate if accepted."""

    outcome: RowOutcome
    candidate: Optional[TransactionCandidate] = None


@dataclass
class NormalizationStats:
    """Per-file tally of row outcomes."""

    counts: Counter = field(default_factory=Counter)

    def record(self, outcome: RowOutcome) -> None:
        self.counts[outcome] += 1

    @property
    def accepted(self) -> int:
        return self.counts[RowOutcome.ACCEPTED]

    @property
    def skipped(self) -> dict[RowOutcome, int]:
        return {
            outcome: count
            for outcome, count in self.counts.items()
            if outcome != RowOutcome.ACCEPTED and count
        }


def sanitize_header(name: str) -> str:
    """Clean a CSV column name.

    Strips a byte-order mark, surrounding double quotes and whitespace,
    so '\\ufeff"Date" ' becomes 'Date'.
    """
    cleaned = name.lstrip("\ufeff").strip()
    cleaned = _SURROUNDING_QUOTES.sub("", cleaned)
    return cleaned.strip()


def _detect_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
    except csv.Error:
        return ","


def read_statement_rows(csv_file_path: str | Path) -> Iterator[dict[str, str]]:
    """Lazily yield statement rows keyed by sanitized column name.

    The header is sanitized once before any row is produced. Bytes that are
    not valid UTF-8 decode to U+FFFD so one mis-encoded payee does not fail
    the file. The file stays open until the iterator is exhausted or closed.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
    """
    csv_path = Path(csv_file_path)
    if not csv_path.is_file():
        raise FileNotFoundError(f"File not found: {csv_file_path}")

    with open(csv_path, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.reader(f, delimiter=_detect_delimiter(sample))

        header = next(reader, None)
        if header is None:
            return
        fieldnames = [sanitize_header(name) for name in header]

        for values in reader:
            if not any(value.strip() for value in values):
                continue
            row = dict(zip(fieldnames, values))
            for missing in fieldnames[len(values):]:
                row[missing] = ""
            yield row


def _field(row: Mapping[str, Optional[str]], column: Optional[str]) -> str:
    if column is None:
        return ""
    return (row.get(column) or "").strip()


def normalize_row(
    row: Mapping[str, Optional[str]],
    config: InstitutionConfig,
    account_id: int,
    bank_category_ids: Optional[Mapping[str, int]] = None,
) -> NormalizedRow:
    """Convert one raw statement row into a transaction candidate.

    Args:
        row: Raw row keyed by sanitized column name
        config: Institution configuration with the column bindings
        account_id: Target account ID
        bank_category_ids: Upper-cased bank category label -> category ID

    Returns:
        NormalizedRow; ``candidate`` is set only for ACCEPTED rows
    """
    payee = _field(row, config.payee_column)
    if not payee:
        return NormalizedRow(RowOutcome.SKIPPED_MISSING_FIELD)

    raw_date = _field(row, config.date_column)
    if not raw_date:
        return NormalizedRow(RowOutcome.SKIPPED_MISSING_FIELD)
    try:
        txn_date = parse_date(raw_date, config.date_format)
    except ValueError:
        return NormalizedRow(RowOutcome.SKIPPED_UNPARSEABLE_DATE)

    raw_amount = _field(row, config.amount_column)
    if not raw_amount:
        return NormalizedRow(RowOutcome.SKIPPED_MISSING_FIELD)
    try:
        amount = parse_amount(raw_amount)
    except ValueError:
        return NormalizedRow(RowOutcome.SKIPPED_UNPARSEABLE_AMOUNT)

    category_id = None
    bank_category = _field(row, config.bank_category_column).upper()
    if bank_category and bank_category_ids:
        category_id = bank_category_ids.get(bank_category)

    candidate = TransactionCandidate(
        date=txn_date,
        amount=amount,
        description=payee,
        party_name=payee,
        account_id=account_id,
        category_id=category_id,
    )
    return NormalizedRow(RowOutcome.ACCEPTED, candidate)
