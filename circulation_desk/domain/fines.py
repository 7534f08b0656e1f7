"""Due date, overdue and fine arithmetic for borrow records"""

from datetime import date
from decimal import Decimal
from typing import Iterable

from circulation_desk.utils.date_utils import add_days, epoch_day_difference

ZERO = Decimal("0")


def compute_due_date(borrow_date: date, borrow_days: int) -> date:
    """Due date is the borrow date plus the item's borrow period"""
    return add_days(borrow_date, borrow_days)


def is_overdue(due_date: date, as_of: date) -> bool:
    """
    An item is overdue only once the current date is strictly after its due date.

    Returning on the due date itself is on time.
    """
    return as_of > due_date


def days_overdue(due_date: date, as_of: date) -> int:
    """Days past the due date, 0 when not overdue"""
    if not is_overdue(due_date, as_of):
        return 0
    return epoch_day_difference(due_date, as_of)


def calculate_fine(due_date: date, daily_fine_rate: Decimal, as_of: date) -> Decimal:
    """
    Fine owed for a single loan.

    fine = days_overdue × daily_fine_rate

    Example:
        rate 0.50, returned 3 days late → 1.50
    """
    # str() keeps float rates like 0.1 from dragging in binary noise
    return days_overdue(due_date, as_of) * Decimal(str(daily_fine_rate))


def total_fines(fines: Iterable[Decimal]) -> Decimal:
    """Sum of individual fines (0 for none)"""
    return sum(fines, ZERO)
