from shopledger.models.inventory import Bill, BillItem, Expense, ProfitLedgerEntry, StockItem

__all__ = [
    "Bill",
    "BillItem",
    "Expense",
    "ProfitLedgerEntry",
    "StockItem",
]
