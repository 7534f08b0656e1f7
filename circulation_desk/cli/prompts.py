"""Line-based console prompts that re-ask until the input parses"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, TextIO

from circulation_desk.utils.date_utils import parse_iso_date


class Prompter:
    """Reads answers from a text stream, writing prompts to another"""

    def __init__(self, stdin: TextIO, stdout: TextIO):
        self.stdin = stdin
        self.stdout = stdout

    def say(self, message: str = "") -> None:
        self.stdout.write(message + "\n")

    def ask(self, prompt: str) -> str:
        """One line of input, without the trailing newline. EOFError at end of input."""
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    def ask_int(self, prompt: str, default: Optional[int] = None) -> int:
        answer = self.ask(prompt)
        while True:
            if not answer.strip() and default is not None:
                return default
            try:
                return int(answer.strip())
            except ValueError:
                answer = self.ask("Please enter a valid number: ")

    def ask_decimal(self, prompt: str, default: Optional[Decimal] = None) -> Decimal:
        answer = self.ask(prompt)
        while True:
            if not answer.strip() and default is not None:
                return default
            try:
                value = Decimal(answer.strip())
            except InvalidOperation:
                value = None
            if value is not None and value.is_finite():
                return value
            answer = self.ask("Please enter a valid number: ")

    def ask_date(self, prompt: str) -> date:
        while True:
            parsed = parse_iso_date(self.ask(prompt))
            if parsed is not None:
                return parsed
            self.say("Invalid date format. Please use YYYY-MM-DD format.")
