"""
Parser for bank SMS notifications.

A message is classified by keyword, income first, and handed to the matching
extraction flow. Messages that carry no recognisable amount are skipped, never
reported as errors.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from models.transaction import ParsedTransaction, TransactionType
from utils.field_extractors import (
    describe_expense,
    describe_income,
    extract_balance,
    extract_date,
    extract_expense_amount,
    extract_income_amount,
    extract_recipient,
    extract_ref_no,
    extract_sender,
    extract_time,
)
from utils.message_segmenter import split_messages

logger = logging.getLogger(__name__)

__all__ = [
    'INCOME_KEYWORDS',
    'EXPENSE_KEYWORDS',
    'parse_sms',
    'parse_multiple_sms',
    'parse_bulk_sms',
    'parse_credit_message',
    'parse_debit_message',
]

INCOME_KEYWORDS = ("credited", "received", "deposit")
EXPENSE_KEYWORDS = ("debited", "transfered", "transferred", "withdrawn", "paid", "payment")


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def parse_credit_message(sms: str, now: Optional[datetime] = None) -> Optional[ParsedTransaction]:
    """
    Extract an income record, or None when no credited amount can be found.

    Example:
        "Dear Bethe your Account 1*****4624 has been Credited with ETB 1,000.00 from
        Fitsum Gmariam, on 27/11/2025 at 13:22:05 with Ref No FT25331KMH5G Your Current
        Balance is ETB 28,633.18"
    """
    found = extract_income_amount(sms)
    if found is None:
        return None

    sender = extract_sender(sms) or found.counterparty
    return ParsedTransaction(
        type=TransactionType.INCOME,
        amount=found.amount,
        balance=extract_balance(sms),
        from_person=sender,
        description=describe_income(sender),
        transaction_date=extract_date(sms, now),
        transaction_time=extract_time(sms, now),
        ref_no=extract_ref_no(sms),
        sms_content=sms,
    )


def parse_debit_message(sms: str, now: Optional[datetime] = None) -> Optional[ParsedTransaction]:
    """
    Extract an expense record, or None when no debited amount can be found.

    Example:
        "Dear Bethe your Account 1****4624 has been debited with ETB 100.57.
        Your Current Balance is ETB 28532.61"
    """
    found = extract_expense_amount(sms)
    if found is None:
        return None

    recipient = extract_recipient(sms)
    return ParsedTransaction(
        type=TransactionType.EXPENSE,
        amount=found.amount,
        balance=extract_balance(sms),
        from_person=recipient,
        description=describe_expense(recipient),
        transaction_date=extract_date(sms, now),
        transaction_time=extract_time(sms, now),
        ref_no=extract_ref_no(sms),
        sms_content=sms,
    )


# Order matters: a message mentioning both a credit and a debit is income
# whenever the income flow resolves an amount.
CLASSIFIERS: List[Tuple[Tuple[str, ...], Callable[[str, Optional[datetime]], Optional[ParsedTransaction]]]] = [
    (INCOME_KEYWORDS, parse_credit_message),
    (EXPENSE_KEYWORDS, parse_debit_message),
]


def parse_sms(sms_text: str, now: Optional[datetime] = None) -> Optional[ParsedTransaction]:
    """Classify a single message and return its transaction, or None to skip it."""
    if not isinstance(sms_text, str):
        raise TypeError(f"SMS text must be a string, got {type(sms_text).__name__}")

    lowered = sms_text.lower()
    for keywords, flow in CLASSIFIERS:
        if not _contains_any(lowered, keywords):
            continue
        transaction = flow(sms_text, now)
        if transaction is not None:
            return transaction

    logger.debug(f"No transaction recognised in message: {sms_text[:60]!r}")
    return None


def parse_multiple_sms(messages: Iterable[str], now: Optional[datetime] = None) -> List[ParsedTransaction]:
    """Parse each message in order, dropping the ones that are not transactions."""
    transactions = []
    for message in messages:
        transaction = parse_sms(message, now)
        if transaction is not None:
            transactions.append(transaction)
    return transactions


def parse_bulk_sms(bulk_text: str, now: Optional[datetime] = None) -> List[ParsedTransaction]:
    """Split pasted text into messages and parse every one of them."""
    messages = split_messages(bulk_text)
    transactions = parse_multiple_sms(messages, now)
    logger.info(f"Parsed {len(transactions)} transaction(s) from {len(messages)} message(s)")
    return transactions
