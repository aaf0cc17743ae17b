"""
Booking reports built with pandas.
"""
from typing import Dict, Any, List
import pandas as pd

from ..currency import parse_amount

BOOKING_COLUMNS = ["id", "customer", "item", "date", "amount", "status", "paymentMethod", "paymentStatus"]
SUMMARY_COLUMNS = ["status", "paymentMethod", "bookings", "total"]


def bookings_frame(bookings: List[Dict[str, Any]]) -> pd.DataFrame:
    """One row per booking with the numeric value of its display amount."""
    df = pd.DataFrame(bookings, columns=BOOKING_COLUMNS)
    df["amountValue"] = pd.to_numeric(df["amount"].map(parse_amount), errors="coerce")
    return df


def summarize_bookings(bookings: List[Dict[str, Any]]) -> pd.DataFrame:
    """Count and total bookings per status and payment method."""
    df = bookings_frame(bookings)
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df["paymentMethod"] = df["paymentMethod"].fillna("unspecified")
    summary = df.groupby(["status", "paymentMethod"], as_index=False).agg(
        bookings=("id", "count"),
        total=("amountValue", "sum"),
    )
    summary["total"] = summary["total"].round(2)
    return summary.sort_values(["status", "paymentMethod"]).reset_index(drop=True)


def bookings_summary_csv(bookings: List[Dict[str, Any]]) -> str:
    return summarize_bookings(bookings).to_csv(index=False)
