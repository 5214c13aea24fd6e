"""Interactive questions asked while generating a pack."""

import logging
from typing import Callable

from svcpack.errors import Cancelled

log = logging.getLogger("svcpack.console")


class Console:
    """Asks the user questions and prints user-facing messages

    Args:
        input_func: Reads one answer, called with the prompt text
        output_func: Prints one line of text
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self.input_func = input_func
        self.output_func = output_func

    def print(self, text: str) -> None:
        self.output_func(text)

    def _ask(self, prompt: str) -> str:
        try:
            return self.input_func(prompt).strip()
        except EOFError:
            raise Cancelled("No answer given")

    def get_number(self, question: str, maximum: int) -> int:
        """Ask for a number between 1 and maximum, asking again until one is given

        Args:
            question: Text shown before the answer
            maximum: Highest number accepted

        Returns:
            The chosen number, never a default
        """
        while True:
            answer = self._ask(question)
            try:
                number = int(answer)
            except ValueError:
                self.print(f"Please enter a number from 1 to {maximum}")
                continue
            if 1 <= number <= maximum:
                return number
            log.debug(f"Rejected out of range answer {number}")
            self.print(f"Please enter a number from 1 to {maximum}")

    def get_prompt(self, question: str, default: bool) -> bool:
        """Ask a yes/no question, an empty answer picks the default"""
        suffix = "[Y/n]" if default else "[y/N]"
        while True:
            answer = self._ask(f"{question} {suffix} ").lower()
            if answer == "":
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
