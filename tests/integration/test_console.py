"""Integration tests driving the console menu with scripted input"""

import io
import pytest
from decimal import Decimal
from circulation_desk.cli.console import ConsoleApp, configure, main
from circulation_desk.cli.prompts import Prompter
from circulation_desk.config import Settings
from circulation_desk.domain.circulation import Library


def script(*lines: str) -> io.StringIO:
    return io.StringIO("".join(line + "\n" for line in lines))


def run_session(library: Library, *lines: str) -> str:
    stdout = io.StringIO()
    ConsoleApp(library, Prompter(script(*lines), stdout)).run()
    return stdout.getvalue()


ADD_BOOK = ("2", "B1", "Dune", "Herbert", "978-0441013593")
ADD_MEMBER = ("4", "M1", "Ada", "ada@example.com")


@pytest.fixture
def defaults() -> Settings:
    return Settings(_env_file=None, daily_fine_rate=Decimal("0.50"), book_borrow_days=14, magazine_borrow_days=7)


def test_configure_reads_answers(defaults):
    stdout = io.StringIO()
    config = configure(Prompter(script("0.75", "21", "5"), stdout), defaults)

    assert config.daily_fine_rate == Decimal("0.75")
    assert config.book_borrow_days == 21
    assert config.magazine_borrow_days == 5
    assert "- Daily fine rate: $0.75" in stdout.getvalue()


def test_configure_blank_and_non_positive_fall_back(defaults):
    config = configure(Prompter(script("", "0", "-3"), io.StringIO()), defaults)

    assert config.daily_fine_rate == Decimal("0.50")
    assert config.book_borrow_days == 14
    assert config.magazine_borrow_days == 7


def test_configure_reprompts_bad_numbers(defaults):
    stdout = io.StringIO()
    config = configure(Prompter(script("cheap", "-1", "0.25", "two weeks", "10", ""), stdout), defaults)

    assert config.daily_fine_rate == Decimal("0.25")
    assert config.book_borrow_days == 10
    assert config.magazine_borrow_days == 7
    assert "Please enter a valid number" in stdout.getvalue()
    assert "Fine rate cannot be negative" in stdout.getvalue()


def test_configure_reprompts_borrow_period_too_long(defaults):
    stdout = io.StringIO()
    config = configure(Prompter(script("", "99999999", "30", ""), stdout), defaults)

    assert config.book_borrow_days == 30
    assert config.magazine_borrow_days == 7
    assert "Borrow period cannot exceed 3650 days" in stdout.getvalue()


def test_configure_negative_zero_rate_prints_plain_zero(defaults):
    stdout = io.StringIO()
    config = configure(Prompter(script("-0", "", ""), stdout), defaults)

    assert config.daily_fine_rate == 0
    assert "- Daily fine rate: $0.00" in stdout.getvalue()
    assert "$-0.00" not in stdout.getvalue()


def test_add_borrow_return_session(library, clock):
    output = run_session(
        library,
        *ADD_BOOK,
        *ADD_MEMBER,
        "5", "M1", "B1",
        "1",
        "6", "M1", "B1",
        "10",
    )

    assert "Added: Dune" in output
    assert "Member added: Ada" in output
    assert "✅ Ada successfully borrowed: Dune" in output
    assert "Due Date: 2024-03-15" in output
    assert "Borrowed by: M1" in output
    assert "✅ Ada successfully returned: Dune" in output
    assert "Item returned late" not in output
    assert library.find_item("B1").is_available is True


def test_borrow_refusals_name_the_reason(library):
    output = run_session(
        library,
        *ADD_BOOK,
        *ADD_MEMBER,
        "4", "M2", "Grace", "grace@example.com",
        "5", "ZZ", "B1",
        "5", "M1", "ZZ",
        "5", "M1", "B1",
        "5", "M2", "B1",
        "6", "M2", "B1",
        "10",
    )

    assert "❌ Member with ID 'ZZ' not found." in output
    assert "❌ Item with ID 'ZZ' not found." in output
    assert "❌ Item is already borrowed by someone else." in output
    assert "❌ This item was not borrowed by this member." in output
    assert library.get_borrow_record("B1").member_id == "M1"


def test_overdue_member_is_blocked_and_fined_on_return(library, clock):
    session_one = run_session(library, *ADD_BOOK, *ADD_MEMBER, "2", "B2", "Emma", "Austen", "111", "5", "M1", "B1", "10")
    assert "successfully borrowed" in session_one

    clock.advance(17)  # 3 days late at $0.50/day
    output = run_session(
        library,
        "5", "M1", "B2",
        "8", "M1",
        "9", "",
        "6", "M1", "B1",
        "10",
    )

    assert "❌ Member has overdue items. Please return them first." in output
    assert "Total outstanding fines: $1.50" in output
    assert "⚠️  OVERDUE by 3 days" in output
    assert "💰 Total Outstanding Fines: $1.50" in output
    assert "👤 Member: Ada (M1)" in output
    assert "Overdue by: 3 days" in output
    assert "⚠️  Item returned late! Fine applied: $1.50" in output
    assert "Days overdue: 3" in output
    assert library.has_overdue_items("M1") is False


def test_add_magazine_reprompts_bad_date(library):
    output = run_session(
        library,
        "3", "MG1", "Monthly", "March 2024", "2024-03-01", "x", "12",
        "7", "MG1",
        "10",
    )

    assert "Invalid date format. Please use YYYY-MM-DD format." in output
    assert "Magazine: Monthly - Issue #12 (2024-03-01)" in output
    assert "Borrow Period: 7 days" in output


def test_duplicate_ids_reported_not_raised(library):
    output = run_session(library, *ADD_BOOK, *ADD_BOOK, *ADD_MEMBER, *ADD_MEMBER, "10")

    assert "❌ Item 'B1' is already registered" in output
    assert "❌ Member 'M1' is already registered" in output
    assert len(library.get_all_items()) == 1
    assert len(library.get_all_members()) == 1


def test_empty_reports(library):
    output = run_session(library, "1", "9", "", "7", "NOPE", "8", "NOPE", "10")

    assert "No items in the library." in output
    assert "✅ No overdue items found!" in output
    assert "❌ Item with ID 'NOPE' not found." in output
    assert "❌ Member with ID 'NOPE' not found." in output


def test_invalid_menu_choice_and_end_of_input(library):
    output = run_session(library, "42", "menu")

    assert "Invalid choice! Please enter a number between 1-10." in output
    assert "Please enter a valid number" in output
    assert output.rstrip().endswith("Thank you for using the Library Management System!")


def test_main_runs_full_session(defaults):
    stdout = io.StringIO()
    stdin = script("0.50", "14", "7", *ADD_BOOK, "1", "10")

    assert main(stdin=stdin, stdout=stdout, app_settings=defaults) == 0

    output = stdout.getvalue()
    assert "Configuration saved:" in output
    assert "Book: Dune by Herbert (ISBN: 978-0441013593)" in output
    assert "Status: Available" in output


def test_main_without_input_exits_nonzero(defaults):
    assert main(stdin=io.StringIO(""), stdout=io.StringIO(), app_settings=defaults) == 1
