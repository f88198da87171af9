"""
Unit tests for the bank statement parsers.
"""
import unittest
from datetime import date

from models.statement import (
    BANK_DESCRIPTION_PLACEHOLDER,
    BankType,
    ColumnRole,
    TransactionType,
)
from services.statement_parsers import (
    BankFormatBParser,
    bank_format_a_parser,
    bank_format_b_parser,
)
from tests.fixtures.statement_fixtures import (
    BANK_FORMAT_A_CSV,
    BANK_FORMAT_A_TOTAL_EXPENSE,
    BANK_FORMAT_A_TOTAL_INCOME,
    BANK_FORMAT_B_CSV,
    BANK_FORMAT_B_TOTAL_EXPENSE,
    BANK_FORMAT_B_TOTAL_INCOME,
)

BANK_A_HEADER = "取引日,入出金(円),残高(円),入出金先内容\n"
BANK_B_HEADER = "日付,摘要,お支払金額,お預り金額,残高\n"


class TestBankFormatAParser(unittest.TestCase):
    def test_parse_reference_statement(self):
        result = bank_format_a_parser.parse(BANK_FORMAT_A_CSV)

        self.assertTrue(result.success)
        self.assertEqual(result.bank_type, BankType.FORMAT_A)
        self.assertEqual(result.errors, [])
        self.assertEqual(len(result.transactions), 3)
        self.assertEqual(result.total_income, BANK_FORMAT_A_TOTAL_INCOME)
        self.assertEqual(result.total_expense, BANK_FORMAT_A_TOTAL_EXPENSE)

        first = result.transactions[0]
        self.assertEqual(first.date, date(2024, 4, 1))
        self.assertEqual(first.amount, 3500)
        self.assertEqual(first.type, TransactionType.EXPENSE)
        self.assertEqual(first.balance, 496500)
        self.assertEqual(first.description, "ｺﾝﾋﾞﾆ")

        salary = result.transactions[1]
        self.assertEqual(salary.type, TransactionType.INCOME)
        self.assertEqual(salary.amount, 280000)

        card = result.transactions[2]
        self.assertEqual(card.amount, 12000)
        self.assertEqual(card.description, "カード引落し, 4月分")

    def test_raw_data_keeps_original_columns(self):
        result = bank_format_a_parser.parse(BANK_FORMAT_A_CSV)
        self.assertEqual(
            result.transactions[0].raw_data,
            {"取引日": "20240401", "入出金(円)": "-3500", "残高(円)": "496500", "入出金先内容": "ｺﾝﾋﾞﾆ"}
        )

    def test_missing_description_uses_placeholder(self):
        result = bank_format_a_parser.parse(BANK_A_HEADER + "20240401,1000,1000,\n")
        self.assertEqual(result.transactions[0].description, BANK_DESCRIPTION_PLACEHOLDER)

    def test_blank_balance_is_absent(self):
        result = bank_format_a_parser.parse(BANK_A_HEADER + "20240401,1000,,振込\n")
        self.assertIsNone(result.transactions[0].balance)

    def test_zero_amount_is_income(self):
        result = bank_format_a_parser.parse(BANK_A_HEADER + "20240401,0,1000,利息\n")
        self.assertEqual(result.transactions[0].amount, 0)
        self.assertEqual(result.transactions[0].type, TransactionType.INCOME)

    def test_invalid_amount_is_row_error(self):
        content = BANK_A_HEADER + "20240401,abc,1000,振込\n20240402,500,1500,振込\n"
        result = bank_format_a_parser.parse(content)

        self.assertTrue(result.success)
        self.assertEqual(len(result.transactions), 1)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].row, 2)
        self.assertEqual(result.errors[0].message, "無効な金額: abc")
        self.assertEqual(result.errors[0].raw_line, "20240401,abc,1000,振込")

    def test_invalid_date_is_row_error(self):
        result = bank_format_a_parser.parse(BANK_A_HEADER + "2024/13/01,100,100,x\n")

        self.assertFalse(result.success)
        self.assertEqual(result.transactions, [])
        self.assertEqual(result.errors[0].message, "無効な日付形式: 2024/13/01")

    def test_blank_date_and_comment_rows_are_skipped(self):
        content = BANK_A_HEADER + "# exported 2024-04-30\n,1000,1000,合計\n20240401,100,100,x\n"
        result = bank_format_a_parser.parse(content)
        self.assertEqual(result.errors, [])
        self.assertEqual(len(result.transactions), 1)

    def test_header_only(self):
        result = bank_format_a_parser.parse(BANK_A_HEADER)
        self.assertTrue(result.success)
        self.assertEqual(result.transactions, [])
        self.assertEqual(result.total_income, 0)

    def test_empty_content(self):
        result = bank_format_a_parser.parse(" \n\r\n")
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].row, 0)
        self.assertEqual(result.errors[0].message, "CSVファイルが空です")

    def test_missing_required_columns(self):
        result = bank_format_a_parser.parse("取引日,残高(円)\n20240401,1000\n")
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].message, "必須カラム（取引日、入出金）が見つかりません")
        self.assertEqual(result.errors[0].raw_line, "取引日,残高(円)")


class TestBankFormatBParser(unittest.TestCase):
    def test_parse_reference_statement(self):
        result = bank_format_b_parser.parse(BANK_FORMAT_B_CSV)

        self.assertTrue(result.success)
        self.assertEqual(result.bank_type, BankType.FORMAT_B)
        self.assertEqual(len(result.transactions), 3)
        self.assertEqual(result.total_income, BANK_FORMAT_B_TOTAL_INCOME)
        self.assertEqual(result.total_expense, BANK_FORMAT_B_TOTAL_EXPENSE)

        atm = result.transactions[0]
        self.assertEqual(atm.date, date(2024, 4, 1))
        self.assertEqual(atm.type, TransactionType.EXPENSE)
        self.assertEqual(atm.amount, 10000)
        self.assertEqual(atm.balance, 490000)

    def test_deposit_row(self):
        result = bank_format_b_parser.parse(
            "日付,摘要,お支払,お預り,残高\n2024/04/18,給与,,280000,500000\n"
        )
        self.assertEqual(len(result.transactions), 1)
        txn = result.transactions[0]
        self.assertEqual(txn.date, date(2024, 4, 18))
        self.assertEqual(txn.description, "給与")
        self.assertEqual(txn.amount, 280000)
        self.assertEqual(txn.type, TransactionType.INCOME)
        self.assertEqual(txn.balance, 500000)

    def test_rows_without_amounts_are_skipped(self):
        result = bank_format_b_parser.parse(BANK_B_HEADER + "2024/04/01,繰越,,,100000\n")
        self.assertTrue(result.success)
        self.assertEqual(result.transactions, [])
        self.assertEqual(result.errors, [])

    def test_negative_deposit_is_expense(self):
        result = bank_format_b_parser.parse(BANK_B_HEADER + "2024/04/01,取消,,-500,100000\n")
        txn = result.transactions[0]
        self.assertEqual(txn.amount, 500)
        self.assertEqual(txn.type, TransactionType.EXPENSE)

    def test_deposit_takes_precedence(self):
        result = bank_format_b_parser.parse(BANK_B_HEADER + "2024/04/01,訂正,300,700,100000\n")
        txn = result.transactions[0]
        self.assertEqual(txn.amount, 700)
        self.assertEqual(txn.type, TransactionType.INCOME)

    def test_row_numbers_count_preamble(self):
        content = BANK_FORMAT_B_CSV + "2024.04.31,誤り,100,,1\r\n"
        result = bank_format_b_parser.parse(content)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].row, 7)

    def test_header_not_found(self):
        result = bank_format_b_parser.parse("foo,bar\n1,2\n")
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].message, "ヘッダー行が見つかりません")

    def test_header_beyond_scan_limit(self):
        parser = BankFormatBParser(header_scan_limit=2)
        result = parser.parse(BANK_FORMAT_B_CSV)
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].message, "ヘッダー行が見つかりません")

    def test_missing_amount_columns(self):
        # 入金内容 satisfies header detection but is claimed by the description role
        result = bank_format_b_parser.parse("日付,摘要,入金内容\n2024/04/01,x,y\n")
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].message, "入金・出金カラムが見つかりません")
        self.assertEqual(result.errors[0].raw_line, "日付,摘要,入金内容")

    def test_missing_roles_message(self):
        self.assertEqual(
            bank_format_b_parser.missing_roles_message({ColumnRole.DESCRIPTION: 0}),
            "必須カラム（日付）が見つかりません"
        )
        self.assertIsNone(
            bank_format_b_parser.missing_roles_message({ColumnRole.DATE: 0, ColumnRole.DEPOSIT: 2})
        )


def test_unexpected_row_failure_is_isolated(mocker):
    original_parse_row = bank_format_a_parser.parse_row

    def failing_parse_row(row):
        if row.row_number == 3:
            raise RuntimeError("boom")
        return original_parse_row(row)

    mocker.patch.object(bank_format_a_parser, "parse_row", side_effect=failing_parse_row)

    result = bank_format_a_parser.parse(BANK_FORMAT_A_CSV)

    assert result.success is True
    assert len(result.errors) == 1
    assert result.errors[0].row == 3
    assert result.errors[0].message == "パースエラー: boom"
    assert result.errors[0].raw_line == "20240405,280000,776500,給与 カブシキガイシャ"
    assert [t.amount for t in result.transactions] == [3500, 12000]


if __name__ == '__main__':
    unittest.main()
