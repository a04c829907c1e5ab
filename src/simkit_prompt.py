"""
GolfSim Toolkit Prompts

Operator input helpers: EOF-safe reads, the y/n confirmation gate and the
post-run acknowledgment pause.
"""

from typing import Callable


AFFIRMATIVE_TOKENS = ("y", "yes")

Reader = Callable[[str], str]


def safe_input(prompt: str) -> str:
    """Read operator input without raising EOF errors."""
    try:
        return input(prompt)
    except EOFError:
        return ""


def confirm(text: str, read: Reader = safe_input) -> bool:
    """Show text and return True only for an explicit y/yes answer."""

    print()
    print(text)

    try:
        answer = read("Continue? (y/n): ")
    except (KeyboardInterrupt, EOFError):
        print()
        return False

    return (answer or "").strip().lower() in AFFIRMATIVE_TOKENS


def pause(read: Reader = safe_input) -> None:
    try:
        read("Press Enter to return to the menu...")
    except (KeyboardInterrupt, EOFError):
        print()
