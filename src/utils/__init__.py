"""
Utils package.

Parsing:
- `message_segmenter`, `field_extractors`, `sms_parser`: bank SMS text to transactions.
- `csv_tokenizer`, `csv_parser`: CSV exports of the same messages to transactions.
All parsers are pure functions of their input text and never raise for
unrecognised content; they skip it.

Lambda plumbing:
- `lambda_utils`, `handler_decorators`, `auth`, `s3_dao`, `import_config`.
"""
