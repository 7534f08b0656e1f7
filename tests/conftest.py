"""Pytest fixtures for testing"""

import logging
import pytest
from datetime import date, timedelta
from decimal import Decimal
from circulation_desk.domain.circulation import Library
from circulation_desk.domain.models import Book, LibraryConfig, Magazine, Member


START_DATE = date(2024, 3, 1)


class FakeClock:
    """Controllable 'today' for the circulation engine"""

    def __init__(self, today: date = START_DATE):
        self.current = today

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int) -> date:
        self.current = self.current + timedelta(days=days)
        return self.current


@pytest.fixture(autouse=True)
def restore_root_logger():
    """console.main() reconfigures root logging; undo it after each test"""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> LibraryConfig:
    """Fine rate $0.50/day, books 14 days, magazines 7 days"""
    return LibraryConfig(daily_fine_rate=Decimal("0.50"), book_borrow_days=14, magazine_borrow_days=7)


@pytest.fixture
def library(config: LibraryConfig, clock: FakeClock) -> Library:
    return Library(config, clock=clock)


@pytest.fixture
def book() -> Book:
    return Book(id="B1", title="T", author="A", isbn="X")


@pytest.fixture
def magazine() -> Magazine:
    return Magazine(id="MG1", title="Monthly", issue_date=date(2024, 2, 1), issue_number=42)


@pytest.fixture
def member() -> Member:
    return Member(member_id="M1", name="N", email="e")


@pytest.fixture
def stocked_library(library: Library, book: Book, magazine: Magazine, member: Member) -> Library:
    """Library with one book, one magazine and two members (M1, M2)"""
    library.add_item(book)
    library.add_item(magazine)
    library.add_member(member)
    library.add_member(Member(member_id="M2", name="Second", email="second@example.com"))
    return library
