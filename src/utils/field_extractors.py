"""
Field extractors for bank notification text.

Every field is described by an ordered list of ExtractionRule objects. Rules are
tried in order and the first one whose regex matches and whose converter
produces a value wins, so the order of each list is the precedence contract:
more specific phrasings sit above generic ones.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from re import Match, Pattern
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

__all__ = [
    'AmountMatch',
    'ExtractionRule',
    'first_match',
    'parse_amount',
    'extract_income_amount',
    'extract_expense_amount',
    'extract_csv_income_amount',
    'extract_csv_expense_amount',
    'extract_sender',
    'extract_recipient',
    'extract_balance',
    'extract_date',
    'extract_time',
    'extract_ref_no',
    'parse_time_of_day',
    'describe_income',
    'describe_expense',
    'INCOME_AMOUNT_RULES',
    'EXPENSE_AMOUNT_RULES',
    'CSV_INCOME_AMOUNT_RULES',
    'CSV_EXPENSE_AMOUNT_RULES',
]

T = TypeVar('T')

AMOUNT_NUMERAL = r"[\d,]+\.?\d*"
AMOUNT = rf"({AMOUNT_NUMERAL})"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class ExtractionRule(Generic[T]):
    """A named regex paired with the function that turns its match into a value."""
    name: str
    pattern: Pattern[str]
    convert: Callable[[Match[str]], Optional[T]]


@dataclass(frozen=True)
class AmountMatch:
    amount: Decimal
    rule: str
    counterparty: Optional[str] = None


def first_match(rules: List[ExtractionRule[T]], text: str) -> Optional[T]:
    """Return the value of the first rule that matches text and converts cleanly."""
    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        value = rule.convert(match)
        if value is not None:
            logger.debug(f"Rule '{rule.name}' matched: {value!r}")
            return value
    return None


def parse_amount(numeral: Optional[str]) -> Optional[Decimal]:
    """
    Convert a thousands-separated numeral such as "12,345.67" to a Decimal.
    Returns None for anything that is not a finite positive number.
    """
    if not numeral:
        return None
    cleaned = numeral.replace(',', '').strip()
    if not cleaned or cleaned == '.':
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value <= 0:
        return None
    return value


def _clean_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    name = ' '.join(name.split())
    return name or None


def _rule(name: str, regex: str, convert: Callable[[Match[str]], Optional[T]]) -> ExtractionRule[T]:
    return ExtractionRule(name=name, pattern=re.compile(regex, re.IGNORECASE), convert=convert)


def _amount_rule(name: str, regex: str, counterparty_group: Optional[int] = None) -> ExtractionRule[AmountMatch]:
    def convert(match: Match[str]) -> Optional[AmountMatch]:
        amount = parse_amount(match.group('amount'))
        if amount is None:
            return None
        counterparty = _clean_name(match.group(counterparty_group)) if counterparty_group else None
        return AmountMatch(amount=amount, rule=name, counterparty=counterparty)
    return _rule(name, regex, convert)


def _group_amount(match: Match[str]) -> Optional[Decimal]:
    return parse_amount(match.group(1))


def _group_name(match: Match[str]) -> Optional[str]:
    return _clean_name(match.group(1))


def _group_ref(match: Match[str]) -> Optional[str]:
    return match.group(1) or None


def _day_first(match: Match[str]) -> Optional[str]:
    day, month, year = (int(part) for part in match.group(1).split('/'))
    return _iso_date(year, month, day)


def _month_first(match: Match[str]) -> Optional[str]:
    month, day, year = (int(part) for part in match.group(1).split('/'))
    return _iso_date(year, month, day)


def _iso_date(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).strftime(DATE_FORMAT)
    except ValueError:
        return None


def parse_time_of_day(value: str) -> Optional[str]:
    """Return value as HH:MM:SS when it is a valid time of day, else None."""
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).strftime(TIME_FORMAT)
    except ValueError:
        return None


def _valid_time(match: Match[str]) -> Optional[str]:
    return parse_time_of_day(match.group(1))


INCOME_AMOUNT_RULES: List[ExtractionRule[AmountMatch]] = [
    _amount_rule("credited_with", rf"credited with ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
    _amount_rule("credited_by", rf"credited by\s+([^,]+?)\s+with ETB\s*(?P<amount>{AMOUNT_NUMERAL})", counterparty_group=1),
    _amount_rule("received", rf"received ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
    _amount_rule("deposit_of", rf"deposit of ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
]

EXPENSE_AMOUNT_RULES: List[ExtractionRule[AmountMatch]] = [
    _amount_rule("debited_including_fees", rf"debited with ETB\s*(?P<amount>{AMOUNT_NUMERAL})\s+including"),
    _amount_rule("debited_with", rf"debited with ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
    _amount_rule("transferred_to", rf"transferr?ed ETB\s*(?P<amount>{AMOUNT_NUMERAL})\s+to\b"),
    _amount_rule("paid", rf"paid ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
]

# CSV exports only ever carry the core credit/debit/transfer phrasings.
CSV_INCOME_AMOUNT_RULES: List[ExtractionRule[AmountMatch]] = [
    _amount_rule("credited_with", rf"credited with ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
]

CSV_EXPENSE_AMOUNT_RULES: List[ExtractionRule[AmountMatch]] = [
    _amount_rule("debited_with", rf"debited with ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
    _amount_rule("have_transfered", rf"have transfered ETB\s*(?P<amount>{AMOUNT_NUMERAL})"),
]

SENDER_RULES: List[ExtractionRule[str]] = [
    _rule("from_comma", r"\bfrom\s+([^,\n]+?)\s*,", _group_name),
    _rule("from_on", r"\bfrom\s+([^,.\n]+?)\s+on\b", _group_name),
    _rule("from_at", r"\bfrom\s+([^,.\n]+?)\s+at\b", _group_name),
    _rule("from_period", r"\bfrom\s+([^,.\n]+?)\.", _group_name),
]

RECIPIENT_RULES: List[ExtractionRule[str]] = [
    _rule("to_on", r"\bto\s+([^,.\n]+?)\s+on\b", _group_name),
    _rule("to_comma", r"\bto\s+([^,.\n]+?)\s*,", _group_name),
    _rule("to_period", r"\bto\s+([^,.\n]+?)\.", _group_name),
]

BALANCE_RULES: List[ExtractionRule[Decimal]] = [
    _rule("current_balance", rf"Current Balance is ETB\s*{AMOUNT}", _group_amount),
    _rule("balance_is", rf"Balance is ETB\s*{AMOUNT}", _group_amount),
    _rule("balance_colon", rf"Balance:\s*ETB\s*{AMOUNT}", _group_amount),
]

DATE_RULES: List[ExtractionRule[str]] = [
    _rule("on_day_first", r"\bon\s+(\d{2}/\d{2}/\d{4})", _day_first),
    _rule("day_first", r"\b(\d{2}/\d{2}/\d{4})\b", _day_first),
    _rule("month_first", r"\b(\d{1,2}/\d{1,2}/\d{4})\b", _month_first),
]

TIME_RULES: List[ExtractionRule[str]] = [
    _rule("at_time", r"\bat\s+(\d{2}:\d{2}:\d{2})", _valid_time),
    _rule("bare_time", r"\b(\d{2}:\d{2}:\d{2})\b", _valid_time),
]

REF_NO_RULES: List[ExtractionRule[str]] = [
    _rule("ref_no", r"\bRef No\s*([A-Z0-9]+)", _group_ref),
    _rule("reference_no", r"\bReference No:\s*([A-Z0-9]+)", _group_ref),
    _rule("ref_colon", r"\bRef:\s*([A-Z0-9]+)", _group_ref),
    _rule("id_equals", r"\bid=([A-Z0-9]+)", _group_ref),
    _rule("id_colon", r"\bID:\s*([A-Z0-9]+)", _group_ref),
]


def extract_income_amount(text: str) -> Optional[AmountMatch]:
    return first_match(INCOME_AMOUNT_RULES, text)


def extract_expense_amount(text: str) -> Optional[AmountMatch]:
    return first_match(EXPENSE_AMOUNT_RULES, text)


def extract_csv_income_amount(text: str) -> Optional[AmountMatch]:
    return first_match(CSV_INCOME_AMOUNT_RULES, text)


def extract_csv_expense_amount(text: str) -> Optional[AmountMatch]:
    return first_match(CSV_EXPENSE_AMOUNT_RULES, text)


def extract_sender(text: str) -> Optional[str]:
    return first_match(SENDER_RULES, text)


def extract_recipient(text: str) -> Optional[str]:
    return first_match(RECIPIENT_RULES, text)


def extract_balance(text: str) -> Optional[Decimal]:
    return first_match(BALANCE_RULES, text)


def extract_ref_no(text: str) -> Optional[str]:
    return first_match(REF_NO_RULES, text)


def extract_date(text: str, now: Optional[datetime] = None) -> str:
    """
    Find the transaction date as YYYY-MM-DD.

    Day-first dates are preferred, month-first dates are tried after them and
    impossible calendar dates are skipped. Falls back to the processing date.
    """
    found = first_match(DATE_RULES, text)
    if found is not None:
        return found
    return (now or datetime.now()).strftime(DATE_FORMAT)


def extract_time(text: str, now: Optional[datetime] = None) -> str:
    """Find the HH:MM:SS time of day, falling back to the current time."""
    found = first_match(TIME_RULES, text)
    if found is not None:
        return found
    return (now or datetime.now()).strftime(TIME_FORMAT)


def describe_income(sender: Optional[str]) -> str:
    return f"Income from {sender}" if sender else "Income"


def describe_expense(recipient: Optional[str]) -> str:
    return f"Transfer to {recipient}" if recipient else "Expense"
