"""
Unit tests for the Lambda response and request helpers.
"""
import base64
import json
import unittest
from decimal import Decimal

from models.transaction import TransactionType
from utils.lambda_utils import (
    DecimalEncoder,
    create_response,
    mandatory_body_parameter,
    optional_body_parameter,
    parse_json_body,
)


class TestCreateResponse(unittest.TestCase):
    def test_response_shape(self):
        response = create_response(200, {"amount": Decimal("1000.00"), "type": TransactionType.INCOME})

        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(response["headers"]["Content-Type"], "application/json")
        self.assertEqual(response["headers"]["Access-Control-Allow-Origin"], "*")
        self.assertEqual(json.loads(response["body"]), {"amount": "1000.00", "type": "income"})

    def test_decimal_encoder_keeps_precision(self):
        self.assertEqual(json.dumps(Decimal("0.10"), cls=DecimalEncoder), '"0.10"')

    def test_error_body(self):
        response = create_response(400, {"message": "bad input"})

        self.assertEqual(response["statusCode"], 400)
        self.assertEqual(json.loads(response["body"]), {"message": "bad input"})


class TestBodyParameters(unittest.TestCase):
    def test_parse_json_body(self):
        self.assertEqual(parse_json_body({"body": '{"sms": "hello"}'}), {"sms": "hello"})
        self.assertEqual(parse_json_body({}), {})
        self.assertEqual(parse_json_body({"body": None}), {})

    def test_parse_base64_body(self):
        encoded = base64.b64encode(b'{"sms": "hello"}').decode('ascii')
        self.assertEqual(parse_json_body({"body": encoded, "isBase64Encoded": True}), {"sms": "hello"})

    def test_invalid_bodies(self):
        for body in ["not json", "[1, 2]", '"text"']:
            with self.subTest(body=body):
                with self.assertRaises(ValueError):
                    parse_json_body({"body": body})

    def test_optional_parameter(self):
        event = {"body": '{"sms": "hello"}'}
        self.assertEqual(optional_body_parameter(event, "sms"), "hello")
        self.assertIsNone(optional_body_parameter(event, "file"))

    def test_mandatory_parameter(self):
        self.assertEqual(mandatory_body_parameter({"body": '{"sms": "hello"}'}, "sms"), "hello")

        for body in ['{}', '{"sms": ""}']:
            with self.subTest(body=body):
                with self.assertRaises(KeyError) as context:
                    mandatory_body_parameter({"body": body}, "sms")
                self.assertIn("Body parameter sms is required", str(context.exception))


if __name__ == '__main__':
    unittest.main()
