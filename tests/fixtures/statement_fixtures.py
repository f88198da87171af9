"""
Reference statement exports, one per supported format.

Each fixture is matched by exactly one format detector.
"""

# Signed amount column with running balance
BANK_FORMAT_A_CSV = (
    "取引日,入出金(円),残高(円),入出金先内容\n"
    "20240401,-3500,496500,ｺﾝﾋﾞﾆ\n"
    "20240405,280000,776500,給与 カブシキガイシャ\n"
    '20240410,"-12,000",764500,"カード引落し, 4月分"\n'
)
BANK_FORMAT_A_TOTAL_INCOME = 280000
BANK_FORMAT_A_TOTAL_EXPENSE = 15500

# Withdrawal/deposit columns behind an account metadata preamble
BANK_FORMAT_B_CSV = (
    '"お客様番号","0012345"\r\n'
    '"照会期間","2024.04.01～2024.04.30"\r\n'
    "日付,摘要,お支払金額,お預り金額,残高\r\n"
    '2024.04.01,ＡＴＭ,"10,000",,"490,000"\r\n'
    '2024.04.18,給与,,"280,000","770,000"\r\n'
    '2024.04.25,電気料金,"8,123",,"761,877"\r\n'
)
BANK_FORMAT_B_TOTAL_INCOME = 280000
BANK_FORMAT_B_TOTAL_EXPENSE = 18123

# Single amount column, negative amounts are refunds, trailing totals row
CARD_FORMAT_A_CSV = (
    '"利用日","利用店名・商品名","利用者","支払方法","利用金額","支払手数料","支払総額"\n'
    '"2024/04/02","Amazon.co.jp","本人","1回払い","3,980","0","3,980"\n'
    '"2024/04/05","スーパーマーケット","本人","1回払い","2,150","0","2,150"\n'
    '"2024/04/09","Amazon.co.jp 返品","本人","1回払い","-1,200","0","-1,200"\n'
    '"","合計","","","4,930","",""\n'
)
CARD_FORMAT_A_TOTAL_EXPENSE = 6130
CARD_FORMAT_A_TOTAL_REFUND = 1200

# Separate usage and refund columns; one row carries both
CARD_FORMAT_B_CSV = (
    "ご利用日,ご利用店名,ご利用金額,支払区分,今回お支払金額,返金金額\n"
    '2024/04/03,ドラッグストア,"1,500",1回,"1,500",\n'
    '2024/04/08,家電量販店,"30,000",1回,"30,000","5,000"\n'
    "2024/04/12,オンラインショップ,,1回,,800\n"
)
CARD_FORMAT_B_TOTAL_EXPENSE = 31500
CARD_FORMAT_B_TOTAL_REFUND = 5800

ALL_FIXTURES = {
    "bank-format-a": BANK_FORMAT_A_CSV,
    "bank-format-b": BANK_FORMAT_B_CSV,
    "card-format-a": CARD_FORMAT_A_CSV,
    "card-format-b": CARD_FORMAT_B_CSV,
}
