"""Circulation engine - core business logic for borrowing and returning items"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional

from circulation_desk.domain import fines
from circulation_desk.domain.exceptions import DuplicateItemError, DuplicateMemberError
from circulation_desk.domain.models import BorrowRecord, LibraryConfig, LibraryItem, Member


class CirculationOutcome(str, Enum):
    """Why a borrow or return did (or did not) go through"""

    SUCCESS = "success"
    MEMBER_NOT_FOUND = "member_not_found"
    ITEM_NOT_FOUND = "item_not_found"
    ITEM_UNAVAILABLE = "item_unavailable"
    MEMBER_HAS_OVERDUE = "member_has_overdue"
    NOT_BORROWED_BY_MEMBER = "not_borrowed_by_member"


class Library:
    """
    In-memory catalog, membership roll and active-loan table.

    Items and members are kept twice: an ordered list for enumeration in
    registration order and a dict for lookup by identifier. Active loans are
    keyed by item id, so an item has at most one open BorrowRecord.

    Every "current date" question (borrow date, overdue checks, fines) goes
    through the clock, so overdue status can change between two calls with no
    state mutation in between.
    """

    def __init__(self, config: LibraryConfig, clock: Callable[[], date] = date.today):
        self._config = config
        self._clock = clock

        self._items: List[LibraryItem] = []
        self._members: List[Member] = []
        self._item_map: Dict[str, LibraryItem] = {}
        self._member_map: Dict[str, Member] = {}
        self._borrow_records: Dict[str, BorrowRecord] = {}

    @property
    def config(self) -> LibraryConfig:
        return self._config

    def get_config(self) -> LibraryConfig:
        return self._config

    def today(self) -> date:
        return self._clock()

    # Registration

    def add_item(self, item: LibraryItem) -> None:
        """Register an item; identifiers must be unique"""
        if item.id in self._item_map:
            raise DuplicateItemError(item.id)
        self._items.append(item)
        self._item_map[item.id] = item

    def add_member(self, member: Member) -> None:
        """Register a member; identifiers must be unique"""
        if member.member_id in self._member_map:
            raise DuplicateMemberError(member.member_id)
        self._members.append(member)
        self._member_map[member.member_id] = member

    # Circulation

    def attempt_borrow(self, member_id: str, item_id: str) -> CirculationOutcome:
        """
        Lend an item to a member.

        Rules, checked in order:
        - member exists
        - item exists
        - item is available
        - member has no overdue loans (fines alone never block)

        Any failure leaves state untouched.
        """
        outcome = self._check_borrow(member_id, item_id)
        if outcome is CirculationOutcome.SUCCESS:
            member = self._member_map[member_id]
            item = self._item_map[item_id]
            record = BorrowRecord.open(
                member_id=member_id,
                item_id=item_id,
                borrow_date=self.today(),
                borrow_days=self._config.borrow_days_for(item),
            )
            item._check_out()
            member._hold(item)
            self._borrow_records[item_id] = record

        return outcome

    def borrow_item(self, member_id: str, item_id: str) -> bool:
        return self.attempt_borrow(member_id, item_id) is CirculationOutcome.SUCCESS

    def attempt_return(self, member_id: str, item_id: str) -> CirculationOutcome:
        """
        Take an item back from the member who borrowed it.

        The active record must belong to member_id; returning someone else's
        loan is refused. No fine is collected here; read the record first to report one.
        """
        outcome = self._check_return(member_id, item_id)
        if outcome is CirculationOutcome.SUCCESS:
            member = self._member_map[member_id]
            item = self._item_map[item_id]
            del self._borrow_records[item_id]
            item._check_in()
            member._release(item)

        return outcome

    def return_item(self, member_id: str, item_id: str) -> bool:
        return self.attempt_return(member_id, item_id) is CirculationOutcome.SUCCESS

    def _check_borrow(self, member_id: str, item_id: str) -> CirculationOutcome:
        if member_id not in self._member_map:
            return CirculationOutcome.MEMBER_NOT_FOUND
        item = self._item_map.get(item_id)
        if item is None:
            return CirculationOutcome.ITEM_NOT_FOUND
        if not item.is_available:
            return CirculationOutcome.ITEM_UNAVAILABLE
        if self.has_overdue_items(member_id):
            return CirculationOutcome.MEMBER_HAS_OVERDUE
        return CirculationOutcome.SUCCESS

    def _check_return(self, member_id: str, item_id: str) -> CirculationOutcome:
        if member_id not in self._member_map:
            return CirculationOutcome.MEMBER_NOT_FOUND
        if item_id not in self._item_map:
            return CirculationOutcome.ITEM_NOT_FOUND
        record = self._borrow_records.get(item_id)
        if record is None or record.member_id != member_id:
            return CirculationOutcome.NOT_BORROWED_BY_MEMBER
        return CirculationOutcome.SUCCESS

    # Queries

    def get_all_items(self) -> List[LibraryItem]:
        return list(self._items)

    def get_all_members(self) -> List[Member]:
        return list(self._members)

    def find_item(self, item_id: str) -> Optional[LibraryItem]:
        return self._item_map.get(item_id)

    def find_member(self, member_id: str) -> Optional[Member]:
        return self._member_map.get(member_id)

    def get_borrow_record(self, item_id: str) -> Optional[BorrowRecord]:
        return self._borrow_records.get(item_id)

    def active_loans(self) -> List[BorrowRecord]:
        return list(self._borrow_records.values())

    def has_overdue_items(self, member_id: str) -> bool:
        today = self.today()
        return any(
            record.member_id == member_id and record.is_overdue(today)
            for record in self._borrow_records.values()
        )

    def get_overdue_items(self, member_id: str) -> List[BorrowRecord]:
        today = self.today()
        return [
            record
            for record in self._borrow_records.values()
            if record.member_id == member_id and record.is_overdue(today)
        ]

    def calculate_total_fines(self, member_id: str) -> Decimal:
        """Sum of fines on the member's overdue loans, 0 if none"""
        today = self.today()
        rate = self._config.daily_fine_rate
        return fines.total_fines(
            record.calculate_fine(rate, today) for record in self.get_overdue_items(member_id)
        )

    def overdue_report(self) -> Dict[str, List[BorrowRecord]]:
        """Overdue loans per member, members in registration order, only members with any"""
        report: Dict[str, List[BorrowRecord]] = {}
        for member in self._members:
            overdue = self.get_overdue_items(member.member_id)
            if overdue:
                report[member.member_id] = overdue
        return report
