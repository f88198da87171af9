"""
Utils package.

Shared building blocks for statement import:
- Text primitives (decoding, logical line splitting, field/date/amount parsing)
  live in `transaction_parser`.
- Format detectors live in `file_analyzer`.
- Amounts are whole yen stored as integers; dates are calendar dates.
- Ledger persistence goes through `ledger_repository`, which keeps DynamoDB
  items flat (camelCase keys, JSON-compatible values).
"""
