"""Read-only reporting queries for the presentation layer.

Income and expense are bucketed by amount sign, not by category type:
an INCOME-typed category on a negative amount counts as expense.
"""

from collections import defaultdict
from typing import Any

from finimport.database.base import Database
from finimport.domain.entities import CategoryType
from finimport.domain.errors import ValidationError
from finimport.utils.date_parser import get_month_range

FLOW_TYPES = (CategoryType.INCOME.value, CategoryType.EXPENSE.value)


def _flow_sign(flow_type: str) -> int:
    """Map INCOME/EXPENSE to the amount sign that selects it."""
    normalized = flow_type.strip().upper()
    if normalized not in FLOW_TYPES:
        raise ValidationError(f"Invalid type '{flow_type}'. Expected INCOME or EXPENSE")
    return 1 if normalized == CategoryType.INCOME.value else -1


def _month_bounds(month: str):
    try:
        return get_month_range(month)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class ReportService:
    """Service for aggregation queries over imported transactions."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_transactions(self) -> list[dict[str, Any]]:
        """All transactions with account, category and party names, newest first."""
        return [
            {
                "id": row["id"],
                "date": row["date"],
                "amount": row["amount"],
                "description": row["description"],
                "account_name": row["account_name"],
                "category_name": row["category_name"],
                "party_name": row["party_name"],
            }
            for row in self.db.get_transaction_listing()
        ]

    def list_transactions_detailed(self) -> list[dict[str, Any]]:
        """All transactions including category type, newest first."""
        return self.db.get_transaction_listing()

    def list_category_names(self) -> list[str]:
        return [category.name for category in self.db.list_categories()]

    def monthly_cash_flow(self) -> list[dict[str, Any]]:
        """Income, expense and net change per month, transfers excluded.

        Returns:
            List of dicts with month ("YYYY-MM"), total_income, total_expense
            and net_change, oldest month first
        """
        totals: dict[str, dict[str, float]] = defaultdict(
            lambda: {"total_income": 0.0, "total_expense": 0.0, "net_change": 0.0}
        )
        for row in self.db.get_transaction_listing():
            if row["category_type"] == CategoryType.TRANSFER.value:
                continue
            bucket = totals[row["date"].strftime("%Y-%m")]
            amount = row["amount"]
            if amount > 0:
                bucket["total_income"] += amount
            elif amount < 0:
                bucket["total_expense"] += amount
            bucket["net_change"] += amount

        return [
            {
                "month": month,
                "total_income": round(data["total_income"], 2),
                "total_expense": round(data["total_expense"], 2),
                "net_change": round(data["net_change"], 2),
            }
            for month, data in sorted(totals.items())
        ]

    def transactions_by_month_and_type(self, month: str, flow_type: str) -> list[dict[str, Any]]:
        """Transactions of one month on the income or expense side.

        Transfers are included so they can be identified in the listing.

        Args:
            month: Month as "YYYY-MM"
            flow_type: "INCOME" (amount > 0) or "EXPENSE" (amount < 0)
        """
        sign = _flow_sign(flow_type)
        start_date, end_date = _month_bounds(month)
        return [
            row
            for row in self.db.get_transaction_listing(start_date=start_date, end_date=end_date)
            if row["amount"] * sign > 0
        ]

    def category_breakdown(self, month: str, flow_type: str) -> list[dict[str, Any]]:
        """Absolute totals per category for one month and side, transfers excluded."""
        sign = _flow_sign(flow_type)
        start_date, end_date = _month_bounds(month)
        return self._breakdown(
            self.db.get_category_totals(start_date=start_date, end_date=end_date, sign=sign)
        )

    def category_breakdown_all_time(self) -> list[dict[str, Any]]:
        """Absolute expense totals per category over all time, transfers excluded."""
        return self._breakdown(self.db.get_category_totals(sign=-1))

    @staticmethod
    def _breakdown(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        results = [{"name": row["name"], "total": round(abs(row["total"]), 2)} for row in rows]
        return sorted(results, key=lambda r: (-r["total"], r["name"]))
