"""
Unit tests for classifying and parsing bank SMS notifications.
"""
import unittest
from decimal import Decimal

from models.transaction import TransactionType
from utils.sms_parser import (
    parse_sms,
    parse_multiple_sms,
    parse_bulk_sms,
    parse_credit_message,
    parse_debit_message,
)
from tests.fixtures.sms_samples import (
    FIXED_NOW,
    CREDIT_SMS,
    DEBIT_SMS,
    DEBIT_WITH_FEE_SMS,
    TRANSFER_SMS,
    SALARY_SMS,
    PROMOTION_SMS,
)


class TestParseCreditMessage(unittest.TestCase):
    def test_full_credit_message(self):
        tx = parse_credit_message(CREDIT_SMS, FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.INCOME)
        self.assertEqual(tx.amount, Decimal("1000.00"))
        self.assertEqual(tx.balance, Decimal("28633.18"))
        self.assertEqual(tx.from_person, "Fitsum Gmariam")
        self.assertEqual(tx.description, "Income from Fitsum Gmariam")
        self.assertEqual(tx.transaction_date, "2025-11-27")
        self.assertEqual(tx.transaction_time, "13:22:05")
        self.assertEqual(tx.ref_no, "FT25331KMH5G")
        self.assertEqual(tx.sms_content, CREDIT_SMS)

    def test_salary_credit_uses_crediting_institution(self):
        tx = parse_credit_message(SALARY_SMS, FIXED_NOW)

        self.assertEqual(tx.amount, Decimal("12345.67"))
        self.assertEqual(tx.from_person, "NATIONAL BANK OF ETHIOPIA")
        self.assertEqual(tx.description, "Income from NATIONAL BANK OF ETHIOPIA")
        self.assertEqual(tx.transaction_date, "2025-11-30")
        self.assertEqual(tx.transaction_time, "09:30:00")

    def test_credit_without_sender(self):
        tx = parse_credit_message("Your Account has been credited with ETB 300.00 cash", FIXED_NOW)

        self.assertIsNone(tx.from_person)
        self.assertEqual(tx.description, "Income")

    def test_credit_without_amount(self):
        self.assertIsNone(parse_credit_message("Your account was credited", FIXED_NOW))


class TestParseDebitMessage(unittest.TestCase):
    def test_simple_debit_defaults_date_and_time(self):
        tx = parse_debit_message(DEBIT_SMS, FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.EXPENSE)
        self.assertEqual(tx.amount, Decimal("100.57"))
        self.assertEqual(tx.balance, Decimal("28532.61"))
        self.assertIsNone(tx.from_person)
        self.assertEqual(tx.description, "Expense")
        self.assertEqual(tx.transaction_date, "2025-12-01")
        self.assertEqual(tx.transaction_time, "09:30:00")
        self.assertIsNone(tx.ref_no)

    def test_debit_with_fees(self):
        tx = parse_debit_message(DEBIT_WITH_FEE_SMS, FIXED_NOW)

        self.assertEqual(tx.amount, Decimal("1510.35"))
        self.assertEqual(tx.transaction_date, "2025-11-29")
        self.assertEqual(tx.transaction_time, "18:02:11")

    def test_transfer(self):
        tx = parse_debit_message(TRANSFER_SMS, FIXED_NOW)

        self.assertEqual(tx.amount, Decimal("500.00"))
        self.assertEqual(tx.from_person, "Abebe Kebede")
        self.assertEqual(tx.description, "Transfer to Abebe Kebede")
        self.assertEqual(tx.transaction_date, "2025-11-28")
        self.assertEqual(tx.transaction_time, "10:15:00")
        self.assertEqual(tx.ref_no, "FT25332ABC12")
        self.assertEqual(tx.balance, Decimal("28030.31"))


class TestParseSms(unittest.TestCase):
    def test_classifies_income_and_expense(self):
        self.assertEqual(parse_sms(CREDIT_SMS, FIXED_NOW).type, TransactionType.INCOME)
        self.assertEqual(parse_sms(DEBIT_SMS, FIXED_NOW).type, TransactionType.EXPENSE)
        self.assertEqual(parse_sms(TRANSFER_SMS, FIXED_NOW).type, TransactionType.EXPENSE)

    def test_income_takes_precedence_over_debit_wording(self):
        text = (
            "Dear Customer your Account 1*****4624 has been Credited with ETB 250.00 as reversal of "
            "an amount previously debited with ETB 250.00 on 02/12/2025."
        )
        tx = parse_sms(text, FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.INCOME)
        self.assertEqual(tx.amount, Decimal("250.00"))

    def test_income_keyword_without_amount_falls_through_to_expense(self):
        text = "Your payment request was received. The account has been debited with ETB 75.00"
        tx = parse_sms(text, FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.EXPENSE)
        self.assertEqual(tx.amount, Decimal("75.00"))

    def test_round_trip_fields(self):
        text = (
            "Your account has been credited with ETB 1,000.00 today. Ref No ABC123. "
            "Your Current Balance is ETB 5,000.00"
        )
        tx = parse_sms(text, FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.INCOME)
        self.assertEqual(tx.amount, Decimal("1000.00"))
        self.assertEqual(tx.ref_no, "ABC123")
        self.assertEqual(tx.balance, Decimal("5000.00"))

    def test_long_sender_is_kept(self):
        sender = " ".join(["Abebe"] * 50)
        tx = parse_sms(f"Your Account has been credited with ETB 100.00 from {sender}, thanks", FIXED_NOW)

        self.assertEqual(tx.amount, Decimal("100.00"))
        self.assertEqual(tx.from_person, sender)
        self.assertGreater(len(tx.from_person), 250)

    def test_long_reference_is_kept(self):
        reference = "A" * 120
        tx = parse_sms(f"Your Account has been debited with ETB 50.00. id={reference}", FIXED_NOW)

        self.assertEqual(tx.type, TransactionType.EXPENSE)
        self.assertEqual(tx.ref_no, reference)

    def test_long_fields_do_not_abort_a_bulk_parse(self):
        long_message = "Dear Customer your Account has been debited with ETB 50.00. id=" + "A" * 120
        transactions = parse_bulk_sms(f"{long_message}\n\n{CREDIT_SMS}", FIXED_NOW)

        self.assertEqual(len(transactions), 2)

    def test_non_transactions_are_skipped(self):
        self.assertIsNone(parse_sms(PROMOTION_SMS, FIXED_NOW))
        self.assertIsNone(parse_sms("Your debit card has been debited soon", FIXED_NOW))
        self.assertIsNone(parse_sms("", FIXED_NOW))

    def test_parsing_is_repeatable(self):
        first = parse_sms(TRANSFER_SMS, FIXED_NOW)
        second = parse_sms(TRANSFER_SMS, FIXED_NOW)

        self.assertEqual(first, second)
        self.assertEqual(first.model_dump_json(), second.model_dump_json())

    def test_non_string_input(self):
        with self.assertRaises(TypeError):
            parse_sms(None)
        with self.assertRaises(TypeError):
            parse_sms(42)


class TestParseMultipleAndBulk(unittest.TestCase):
    def test_parse_multiple_keeps_order_and_drops_non_transactions(self):
        transactions = parse_multiple_sms([DEBIT_SMS, PROMOTION_SMS, CREDIT_SMS], FIXED_NOW)

        self.assertEqual([tx.amount for tx in transactions], [Decimal("100.57"), Decimal("1000.00")])

    def test_parse_bulk(self):
        bulk = f"{CREDIT_SMS}\n\n{PROMOTION_SMS}\n\n{TRANSFER_SMS} {DEBIT_SMS}"
        transactions = parse_bulk_sms(bulk, FIXED_NOW)

        self.assertEqual(len(transactions), 3)
        self.assertEqual(
            [tx.type for tx in transactions],
            [TransactionType.INCOME, TransactionType.EXPENSE, TransactionType.EXPENSE]
        )
        self.assertEqual(transactions[1].from_person, "Abebe Kebede")

    def test_parse_bulk_nothing_recognised(self):
        self.assertEqual(parse_bulk_sms(PROMOTION_SMS, FIXED_NOW), [])
        self.assertEqual(parse_bulk_sms("", FIXED_NOW), [])

    def test_parse_bulk_non_string(self):
        with self.assertRaises(TypeError):
            parse_bulk_sms(["Dear customer"])


if __name__ == '__main__':
    unittest.main()
