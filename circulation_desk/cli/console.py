"""Interactive console menu for the circulation desk"""

import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from circulation_desk.cli.prompts import Prompter
from circulation_desk.config import Settings, settings
from circulation_desk.domain.circulation import CirculationOutcome, Library
from circulation_desk.domain.exceptions import DomainException, DuplicateItemError, DuplicateMemberError
from circulation_desk.domain.fines import total_fines
from circulation_desk.domain.models import (
    MAX_BORROW_DAYS,
    Book,
    BorrowRecord,
    LibraryConfig,
    LibraryItem,
    Magazine,
    Member,
)
from circulation_desk.infrastructure.observability.logging import log_circulation_event, setup_logging
from circulation_desk.infrastructure.observability.metrics import (
    record_circulation,
    record_late_return,
    record_library_state,
)

logger = logging.getLogger(__name__)

BANNER = "=" * 41

MENU = """
========== MAIN MENU ==========
1. Display All Items
2. Add New Book
3. Add New Magazine
4. Add New Member
5. Borrow Item
6. Return Item
7. Search Item by ID
8. Display Member Info
9. Check Overdue Items
10. Exit"""

EXIT_CHOICE = 10

ITEM_KINDS = (Book.kind, Magazine.kind)

REFUSAL_MESSAGES = {
    CirculationOutcome.ITEM_UNAVAILABLE: "Item is already borrowed by someone else.",
    CirculationOutcome.MEMBER_HAS_OVERDUE: "Member has overdue items. Please return them first.",
    CirculationOutcome.NOT_BORROWED_BY_MEMBER: "This item was not borrowed by this member.",
}


def money(amount) -> str:
    return f"${amount:.2f}"


def ask_borrow_days(prompter: Prompter, kind: str, default: int) -> int:
    """Non-positive answers take the default; periods past MAX_BORROW_DAYS are asked again"""
    days = prompter.ask_int(f"Enter {kind} borrow period (days, default {default}): ", default=default)
    while days > MAX_BORROW_DAYS:
        days = prompter.ask_int(
            f"Borrow period cannot exceed {MAX_BORROW_DAYS} days. Enter {kind} borrow period: ",
            default=default,
        )
    return days if days > 0 else default


def configure(prompter: Prompter, defaults: Settings) -> LibraryConfig:
    """
    Ask for the circulation settings.

    Blank answers take the defaults; non-positive borrow periods fall back to them too.
    """
    prompter.say("========================================")
    prompter.say("   LIBRARY SYSTEM CONFIGURATION")
    prompter.say("========================================")

    rate = prompter.ask_decimal(
        f"Enter daily fine rate (e.g., 0.50 for $0.50 per day, default {money(defaults.daily_fine_rate)}): $",
        default=defaults.daily_fine_rate,
    )
    while rate < 0:
        rate = prompter.ask_decimal("Fine rate cannot be negative. Enter daily fine rate: $")

    book_days = ask_borrow_days(prompter, "book", defaults.book_borrow_days)
    magazine_days = ask_borrow_days(prompter, "magazine", defaults.magazine_borrow_days)

    config = LibraryConfig(
        daily_fine_rate=rate,
        book_borrow_days=book_days,
        magazine_borrow_days=magazine_days,
    )

    prompter.say("\nConfiguration saved:")
    prompter.say(f"- Daily fine rate: {money(config.daily_fine_rate)}")
    prompter.say(f"- Book borrow period: {config.book_borrow_days} days")
    prompter.say(f"- Magazine borrow period: {config.magazine_borrow_days} days")
    return config


class ConsoleApp:
    """Menu loop over a Library; every decision is delegated to the engine"""

    def __init__(self, library: Library, prompter: Prompter):
        self.library = library
        self.prompter = prompter
        self.actions: Dict[int, Callable[[], None]] = {
            1: self.display_all_items,
            2: self.add_book,
            3: self.add_magazine,
            4: self.add_member,
            5: self.borrow_item,
            6: self.return_item,
            7: self.search_item,
            8: self.display_member_info,
            9: self.check_overdue_items,
        }

    def run(self) -> None:
        """Show the menu until Exit is chosen or input runs out"""
        say = self.prompter.say
        say(BANNER)
        say("   WELCOME TO LIBRARY MANAGEMENT SYSTEM")
        say(BANNER)
        self._publish_state()
        try:
            while True:
                say(MENU)
                choice = self.prompter.ask_int(f"Enter your choice (1-{EXIT_CHOICE}): ")
                if choice == EXIT_CHOICE:
                    break
                action = self.actions.get(choice)
                if action is None:
                    say(f"Invalid choice! Please enter a number between 1-{EXIT_CHOICE}.")
                    continue
                action()
        except EOFError:
            logger.info("Input closed, leaving menu")
        say("Thank you for using the Library Management System!")

    # Catalog

    def display_all_items(self) -> None:
        say = self.prompter.say
        say("\n=== Library Items ===")
        items = self.library.get_all_items()
        if not items:
            say("No items in the library.")
            return
        for item in items:
            self._describe_item(item)
            say("---")

    def add_book(self) -> None:
        ask = self.prompter.ask
        self.prompter.say("\n=== Add New Book ===")
        book = Book(
            id=ask("Enter Book ID: "),
            title=ask("Enter Book Title: "),
            author=ask("Enter Author Name: "),
            isbn=ask("Enter ISBN: "),
        )
        self._register_item(book)

    def add_magazine(self) -> None:
        ask = self.prompter.ask
        self.prompter.say("\n=== Add New Magazine ===")
        item_id = ask("Enter Magazine ID: ")
        title = ask("Enter Magazine Title: ")
        issue_date = self.prompter.ask_date("Enter Issue Date (YYYY-MM-DD): ")
        issue_number = self.prompter.ask_int("Enter Issue Number: ")
        self._register_item(Magazine(id=item_id, title=title, issue_date=issue_date, issue_number=issue_number))

    def add_member(self) -> None:
        ask = self.prompter.ask
        self.prompter.say("\n=== Add New Member ===")
        member = Member(
            member_id=ask("Enter Member ID: "),
            name=ask("Enter Member Name: "),
            email=ask("Enter Email: "),
        )
        try:
            self.library.add_member(member)
        except DuplicateMemberError as e:
            logger.warning(f"Registration refused: {e}")
            self.prompter.say(f"❌ {e}")
            return
        logger.info(f"Registered member {member.member_id}")
        self._publish_state()
        self.prompter.say(f"Member added: {member.name}")

    def _register_item(self, item: LibraryItem) -> None:
        try:
            self.library.add_item(item)
        except DuplicateItemError as e:
            logger.warning(f"Registration refused: {e}")
            self.prompter.say(f"❌ {e}")
            return
        logger.info(f"Registered {item.kind} {item.id}")
        self._publish_state()
        self.prompter.say(f"Added: {item.title}")

    def _publish_state(self) -> None:
        """Set the gauges from this library's own counts"""
        sizes = {kind: 0 for kind in ITEM_KINDS}
        for item in self.library.get_all_items():
            sizes[item.kind] = sizes.get(item.kind, 0) + 1
        record_library_state(
            sizes,
            member_count=len(self.library.get_all_members()),
            active_loan_count=len(self.library.active_loans()),
        )

    # Circulation

    def borrow_item(self) -> None:
        say = self.prompter.say
        say("\n=== Borrow Item ===")
        member_id = self.prompter.ask("Enter Member ID: ")
        item_id = self.prompter.ask("Enter Item ID: ")

        outcome = self.library.attempt_borrow(member_id, item_id)
        record_circulation("borrow", outcome.value)
        log_circulation_event(logger, "borrow", member_id, item_id, outcome.value)
        if outcome is CirculationOutcome.SUCCESS:
            self._publish_state()
            member = self.library.find_member(member_id)
            item = self.library.find_item(item_id)
            say(f"✅ {member.name} successfully borrowed: {item.title}")
            record = self.library.get_borrow_record(item_id)
            say(f"Due Date: {record.due_date.isoformat()}")
            return

        self._report_refusal(outcome, member_id, item_id)
        if outcome is CirculationOutcome.MEMBER_HAS_OVERDUE:
            say(f"Total outstanding fines: {money(self.library.calculate_total_fines(member_id))}")

    def return_item(self) -> None:
        say = self.prompter.say
        say("\n=== Return Item ===")
        member_id = self.prompter.ask("Enter Member ID: ")
        item_id = self.prompter.ask("Enter Item ID: ")

        # The record disappears on return, so read it first
        record = self.library.get_borrow_record(item_id)
        outcome = self.library.attempt_return(member_id, item_id)
        record_circulation("return", outcome.value)
        if outcome is not CirculationOutcome.SUCCESS:
            log_circulation_event(logger, "return", member_id, item_id, outcome.value)
            self._report_refusal(outcome, member_id, item_id)
            return

        self._publish_state()
        member = self.library.find_member(member_id)
        item = self.library.find_item(item_id)
        say(f"✅ {member.name} successfully returned: {item.title}")
        today = self.library.today()
        fine = None
        if record.is_overdue(today):
            fine = record.calculate_fine(self.library.config.daily_fine_rate, today)
            record_late_return(fine)
            say(f"⚠️  Item returned late! Fine applied: {money(fine)}")
            say(f"Days overdue: {record.days_overdue(today)}")
        log_circulation_event(logger, "return", member_id, item_id, outcome.value, fine=fine)

    def _report_refusal(self, outcome: CirculationOutcome, member_id: str, item_id: str) -> None:
        if outcome is CirculationOutcome.MEMBER_NOT_FOUND:
            message = f"Member with ID '{member_id}' not found."
        elif outcome is CirculationOutcome.ITEM_NOT_FOUND:
            message = f"Item with ID '{item_id}' not found."
        else:
            message = REFUSAL_MESSAGES[outcome]
        self.prompter.say(f"❌ {message}")

    # Queries

    def search_item(self) -> None:
        say = self.prompter.say
        say("\n=== Search Item ===")
        item_id = self.prompter.ask("Enter Item ID: ")
        item = self.library.find_item(item_id)
        if item is None:
            say(f"❌ Item with ID '{item_id}' not found.")
            return
        say("\n=== Item Found ===")
        self._describe_item(item, show_borrow_date=True)

    def display_member_info(self) -> None:
        say = self.prompter.say
        say("\n=== Member Information ===")
        member_id = self.prompter.ask("Enter Member ID: ")
        member = self.library.find_member(member_id)
        if member is None:
            say(f"❌ Member with ID '{member_id}' not found.")
            return

        say(f"Member ID: {member.member_id}")
        say(f"Name: {member.name}")
        say(f"Email: {member.email}")
        held = member.borrowed_items
        say(f"Borrowed Items: {len(held)}")
        if held:
            say("\nCurrently Borrowed Items:")
            today = self.library.today()
            for item in held:
                say(f"- {item.title} (ID: {item.id})")
                record = self.library.get_borrow_record(item.id)
                if record is not None:
                    say(f"  Due: {record.due_date.isoformat()}")
                    if record.is_overdue(today):
                        say(f"  ⚠️  OVERDUE by {record.days_overdue(today)} days")

        total = self.library.calculate_total_fines(member_id)
        if total > 0:
            say(f"\n💰 Total Outstanding Fines: {money(total)}")

    def check_overdue_items(self) -> None:
        say = self.prompter.say
        say("\n=== Overdue Items Report ===")
        member_id = self.prompter.ask("Enter Member ID (or press Enter for all members): ").strip()

        if not member_id:
            report = self.library.overdue_report()
            if not report:
                say("✅ No overdue items found!")
                return
            for overdue_member_id, records in report.items():
                member = self.library.find_member(overdue_member_id)
                say(f"\n👤 Member: {member.name} ({member.member_id})")
                self._list_overdue(records, indent="  ")
            return

        member = self.library.find_member(member_id)
        if member is None:
            say(f"❌ Member with ID '{member_id}' not found.")
            return
        records = self.library.get_overdue_items(member_id)
        if not records:
            say("✅ No overdue items for this member.")
            return
        say(f"\n👤 Member: {member.name}")
        self._list_overdue(records)

    def _list_overdue(self, records: List[BorrowRecord], indent: str = "") -> None:
        say = self.prompter.say
        today = self.library.today()
        rate = self.library.config.daily_fine_rate
        for record in records:
            item = self.library.find_item(record.item_id)
            say(f"{indent}📚 {item.title} (ID: {item.id})")
            say(f"{indent}   Due: {record.due_date.isoformat()}")
            say(f"{indent}   Overdue by: {record.days_overdue(today)} days")
        total = total_fines(record.calculate_fine(rate, today) for record in records)
        say(f"{indent}💰 Total Fines: {money(total)}")

    def _describe_item(self, item: LibraryItem, show_borrow_date: bool = False) -> None:
        say = self.prompter.say
        say(item.display_details())
        say(f"Status: {'Available' if item.is_available else 'Borrowed'}")
        say(f"Borrow Period: {self.library.config.borrow_days_for(item)} days")
        if item.is_available:
            return
        record = self.library.get_borrow_record(item.id)
        if record is None:
            return
        today = self.library.today()
        say(f"Borrowed by: {record.member_id}")
        if show_borrow_date:
            say(f"Borrow Date: {record.borrow_date.isoformat()}")
        say(f"Due Date: {record.due_date.isoformat()}")
        if record.is_overdue(today):
            say(f"⚠️  OVERDUE by {record.days_overdue(today)} days")


def main(
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    app_settings: Optional[Settings] = None,
) -> int:
    """Console entry point: configure, then run the menu"""
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, service_name=app_settings.service_name)

    prompter = Prompter(stdin or sys.stdin, stdout or sys.stdout)
    try:
        config = configure(prompter, app_settings)
    except EOFError:
        prompter.say("\nNo configuration entered, exiting.")
        return 1
    except DomainException as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    ConsoleApp(Library(config), prompter).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
