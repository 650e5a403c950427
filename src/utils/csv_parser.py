"""
Parser for CSV exports of bank SMS notifications.

The export carries one notification per row with at least a Content column and,
optionally, Date and Time columns. Transaction type and amount come from the
notification text; counterparty, balance and reference reuse the SMS field
extractors.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from dateutil import parser as date_parser

from models.transaction import ParsedTransaction, TransactionType
from utils.csv_tokenizer import tokenize_csv
from utils.field_extractors import (
    DATE_FORMAT,
    TIME_FORMAT,
    AmountMatch,
    describe_expense,
    describe_income,
    extract_balance,
    extract_csv_expense_amount,
    extract_csv_income_amount,
    extract_recipient,
    extract_ref_no,
    extract_sender,
    parse_time_of_day,
)

logger = logging.getLogger(__name__)

__all__ = [
    'parse_csv_content',
    'normalize_header',
    'find_column_index',
    'find_header_row',
    'normalize_csv_date',
    'parse_csv_row',
    'parse_csv_rows',
    'UTF8_BOM',
]

UTF8_BOM = '\ufeff'


def normalize_header(header: List[str]) -> List[str]:
    """Lower-case header cells and strip quote characters and surrounding spaces."""
    return [cell.replace('"', '').replace("'", '').strip().lower() for cell in header]


def find_column_index(header: List[str], name: str) -> Optional[int]:
    """Find a column in a normalized header by exact, case-insensitive name."""
    name = name.lower()
    return header.index(name) if name in header else None


def find_header_row(rows: List[List[str]]) -> Optional[int]:
    """
    Index of the first row that names a content column.

    Exports may open with title or notice lines; everything above the header is
    ignored.
    """
    for index, row in enumerate(rows):
        if find_column_index(normalize_header(row), 'content') is not None:
            return index
    return None


def normalize_csv_date(raw_date: str, now: Optional[datetime] = None) -> str:
    """
    Re-emit a date cell as YYYY-MM-DD.

    Empty cells fall back to the processing date. Cells that cannot be parsed
    are returned unchanged so no row is lost over a date format.
    """
    raw_date = raw_date.strip()
    if not raw_date:
        return (now or datetime.now()).strftime(DATE_FORMAT)
    try:
        return date_parser.parse(raw_date).strftime(DATE_FORMAT)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Keeping unparsed date {raw_date!r}: {str(e)}")
        return raw_date


def _classify_content(content: str) -> Optional[Tuple[TransactionType, AmountMatch]]:
    income = extract_csv_income_amount(content)
    if income is not None:
        return TransactionType.INCOME, income
    expense = extract_csv_expense_amount(content)
    if expense is not None:
        return TransactionType.EXPENSE, expense
    return None


def parse_csv_row(
    content: str,
    raw_date: str = '',
    raw_time: str = '',
    now: Optional[datetime] = None
) -> Optional[ParsedTransaction]:
    """Build a transaction from one row's cells, or None when the content is not a transaction."""
    content = content.strip()
    classified = _classify_content(content)
    if classified is None:
        return None

    transaction_type, found = classified
    if transaction_type == TransactionType.INCOME:
        counterparty = extract_sender(content)
        description = describe_income(counterparty)
    else:
        counterparty = extract_recipient(content)
        description = describe_expense(counterparty)

    return ParsedTransaction(
        type=transaction_type,
        amount=found.amount,
        balance=extract_balance(content),
        from_person=counterparty,
        description=description,
        transaction_date=normalize_csv_date(raw_date, now),
        transaction_time=parse_time_of_day(raw_time) or (now or datetime.now()).strftime(TIME_FORMAT),
        ref_no=extract_ref_no(content),
        sms_content=content,
    )


def parse_csv_content(csv_text: str, now: Optional[datetime] = None) -> List[ParsedTransaction]:
    """
    Parse CSV text into transactions in row order.

    A header without a content column yields no transactions. Rows shorter than
    the header and rows whose content is not a credit, debit or transfer are
    skipped.
    """
    if not isinstance(csv_text, str):
        raise TypeError(f"CSV content must be a string, got {type(csv_text).__name__}")

    return parse_csv_rows(tokenize_csv(csv_text.lstrip(UTF8_BOM)), now)


def parse_csv_rows(rows: List[List[str]], now: Optional[datetime] = None) -> List[ParsedTransaction]:
    """Parse tokenized rows; rows above the header row are skipped."""
    if not rows:
        logger.info("CSV content is empty")
        return []

    header_index = find_header_row(rows)
    if header_index is None:
        logger.warning(f"CSV has no header row with a content column: {normalize_header(rows[0])}")
        return []
    if header_index:
        logger.debug(f"Skipping {header_index} row(s) above the CSV header")

    header = normalize_header(rows[header_index])
    date_col = find_column_index(header, 'date')
    time_col = find_column_index(header, 'time')
    content_col = find_column_index(header, 'content')

    transactions = []
    for row_number, row in enumerate(rows[header_index + 1:], start=header_index + 2):
        if len(row) < len(header):
            logger.debug(f"Skipping row {row_number}: {len(row)} field(s), expected {len(header)}")
            continue

        transaction = parse_csv_row(
            row[content_col],
            raw_date=row[date_col] if date_col is not None else '',
            raw_time=row[time_col] if time_col is not None else '',
            now=now,
        )
        if transaction is None:
            logger.debug(f"Skipping row {row_number}: no transaction in content")
            continue
        transactions.append(transaction)

    logger.info(f"Parsed {len(transactions)} transaction(s) from {len(rows) - header_index - 1} CSV row(s)")
    return transactions
