"""Domain models - pure Python dataclasses representing catalog and circulation entities"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from circulation_desk.domain import fines
from circulation_desk.domain.exceptions import InvalidConfigurationError

DEFAULT_BOOK_BORROW_DAYS = 14
DEFAULT_MAGAZINE_BORROW_DAYS = 7
# Ten years; keeps every due date well inside the calendar range of datetime.date
MAX_BORROW_DAYS = 3650


@dataclass(frozen=True)
class LibraryConfig:
    """System-wide circulation settings, fixed once the library is built"""

    daily_fine_rate: Decimal
    book_borrow_days: int = DEFAULT_BOOK_BORROW_DAYS
    magazine_borrow_days: int = DEFAULT_MAGAZINE_BORROW_DAYS

    def __post_init__(self) -> None:
        try:
            rate = Decimal(str(self.daily_fine_rate))
        except InvalidOperation:
            raise InvalidConfigurationError(f"Daily fine rate is not a number: {self.daily_fine_rate!r}") from None
        if not rate.is_finite() or rate < 0:
            raise InvalidConfigurationError(f"Daily fine rate must be non-negative, got {rate}")
        # abs() turns -0 into 0; frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "daily_fine_rate", abs(rate))

        for name in ("book_borrow_days", "magazine_borrow_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}")
            if value > MAX_BORROW_DAYS:
                raise InvalidConfigurationError(f"{name} must be at most {MAX_BORROW_DAYS} days, got {value}")

    def borrow_days_for(self, item: "LibraryItem") -> int:
        """Borrow period for the item's kind"""
        return item.borrow_days(self)


class LibraryItem(ABC):
    """
    A catalog entry that can be borrowed.

    Availability is read-only from the outside: only the circulation engine
    flips it, through _check_out / _check_in.
    """

    kind: str = "item"

    def __init__(self, id: str, title: str):
        self.id = id
        self.title = title
        self._available = True

    @property
    def is_available(self) -> bool:
        return self._available

    @abstractmethod
    def borrow_days(self, config: Optional[LibraryConfig] = None) -> int:
        """Borrow period in days, resolved from config at call time"""

    @abstractmethod
    def display_details(self) -> str:
        """One-line description used by the presentation layer"""

    def _check_out(self) -> None:
        self._available = False

    def _check_in(self) -> None:
        self._available = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, title={self.title!r}, available={self._available})"


class Book(LibraryItem):
    """Book with author and ISBN (both opaque strings)"""

    kind = "book"

    def __init__(self, id: str, title: str, author: str, isbn: str):
        super().__init__(id, title)
        self.author = author
        self.isbn = isbn

    def borrow_days(self, config: Optional[LibraryConfig] = None) -> int:
        return config.book_borrow_days if config is not None else DEFAULT_BOOK_BORROW_DAYS

    def display_details(self) -> str:
        return f"Book: {self.title} by {self.author} (ISBN: {self.isbn})"


class Magazine(LibraryItem):
    """Magazine issue identified by issue date and number"""

    kind = "magazine"

    def __init__(self, id: str, title: str, issue_date: date, issue_number: int):
        super().__init__(id, title)
        self.issue_date = issue_date
        self.issue_number = issue_number

    def borrow_days(self, config: Optional[LibraryConfig] = None) -> int:
        return config.magazine_borrow_days if config is not None else DEFAULT_MAGAZINE_BORROW_DAYS

    def display_details(self) -> str:
        return f"Magazine: {self.title} - Issue #{self.issue_number} ({self.issue_date.isoformat()})"


@dataclass(eq=False)
class Member:
    """Library member and the items they currently hold"""

    member_id: str
    name: str
    email: str
    _borrowed_items: List[LibraryItem] = field(default_factory=list, init=False, repr=False)

    @property
    def borrowed_items(self) -> List[LibraryItem]:
        """Copy of the held items, in borrow order"""
        return list(self._borrowed_items)

    def _hold(self, item: LibraryItem) -> None:
        self._borrowed_items.append(item)

    def _release(self, item: LibraryItem) -> None:
        # Remove by identity, not equality
        for index, held in enumerate(self._borrowed_items):
            if held is item:
                del self._borrowed_items[index]
                return


@dataclass(frozen=True)
class BorrowRecord:
    """Active loan: who borrowed what, when, and when it is due"""

    member_id: str
    item_id: str
    borrow_date: date
    due_date: date

    @classmethod
    def open(cls, member_id: str, item_id: str, borrow_date: date, borrow_days: int) -> "BorrowRecord":
        """Start a loan; the due date is fixed here and never recomputed"""
        return cls(
            member_id=member_id,
            item_id=item_id,
            borrow_date=borrow_date,
            due_date=fines.compute_due_date(borrow_date, borrow_days),
        )

    def is_overdue(self, as_of: Optional[date] = None) -> bool:
        return fines.is_overdue(self.due_date, as_of or date.today())

    def days_overdue(self, as_of: Optional[date] = None) -> int:
        return fines.days_overdue(self.due_date, as_of or date.today())

    def calculate_fine(self, daily_fine_rate: Decimal, as_of: Optional[date] = None) -> Decimal:
        return fines.calculate_fine(self.due_date, daily_fine_rate, as_of or date.today())
