from typing import List, NamedTuple, Optional, Sequence, Tuple
from colorama import Fore, Style
from utils import PRINT_LOCK

# Smallest and largest value a group may take (A..Z)
MIN_VALUE = 1
MAX_VALUE = 26


class InvalidInputError(ValueError):
    """Raised when the raw input is non-empty and not all decimal digits."""

    def __init__(self, raw):
        self.raw = raw
        super().__init__(f"Expected decimal digits only, got {raw!r}")


class Combination(NamedTuple):
    letters: str
    numbers: str

    @classmethod
    def from_groups(cls, values: Sequence[int]) -> "Combination":
        return cls("".join(group_letter(v) for v in values), " ".join(str(v) for v in values))

    @property
    def groups(self) -> List[int]:
        return split_numbers(self.numbers)

    def as_dict(self):
        return {"letters": self.letters, "numbers": self.numbers}


def group_letter(value: int) -> str:
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise ValueError(f"Group value {value} is outside {MIN_VALUE}..{MAX_VALUE}")
    return chr(64 + value)


def group_value(digits: str, start: int, length: int) -> Optional[int]:
    """Return the value of the ``length``-digit group starting at ``start``.

    Returns None when the slice runs past the end of ``digits`` or does not
    form a valid group: a single digit must be 1-9 and a pair must be 10-26,
    so a lone '0' and a leading-zero pair like "05" are both rejected.
    """
    if length not in (1, 2) or start + length > len(digits):
        return None
    value = int(digits[start:start + length])
    if length == 1:
        return value if value >= 1 else None
    return value if 10 <= value <= MAX_VALUE else None


def is_digit_string(raw) -> bool:
    # str.isdigit() also accepts superscripts and other unicode digits
    return isinstance(raw, str) and all("0" <= ch <= "9" for ch in raw)


def validate_digits(raw) -> str:
    if not is_digit_string(raw):
        raise InvalidInputError(raw)
    return raw


def split_numbers(numbers: str) -> List[int]:
    return [int(part) for part in numbers.split(" ")] if numbers else []


def reconstruct_digits(combination: Combination) -> str:
    return "".join(str(v) for v in split_numbers(combination.numbers))


def count_combinations(digits: str) -> int:
    """Count every valid decomposition of ``digits`` without building them.

    Classic decode-ways dynamic programme, used to report how many
    combinations exist in total when a run stops at the cap.
    """
    digits = validate_digits(digits)
    if not digits:
        return 0
    n = len(digits)
    # ways[i] = number of decompositions of digits[i:]
    ways = [0] * (n + 1)
    ways[n] = 1
    for i in range(n - 1, -1, -1):
        if group_value(digits, i, 1) is not None:
            ways[i] += ways[i + 1]
        if group_value(digits, i, 2) is not None:
            ways[i] += ways[i + 2]
    return ways[0]


def print_combinations(combinations: Sequence[Combination], start: int = 1, columns: int = 3):
    """Thread-safe printing of a page of combinations as a grid.

    ``start`` is the 1-based number of the first item, so that the numbers
    shown line up with the ones accepted by ``--copy``.
    """
    if not combinations:
        return
    cells: List[Tuple[str, str]] = []
    for idx, combo in enumerate(combinations, start):
        cells.append((f"{idx:>4}. {combo.letters}", " " * 6 + combo.numbers))
    width = max(max(len(head), len(tail)) for head, tail in cells) + 2
    with PRINT_LOCK:
        lines = []
        for row_start in range(0, len(cells), columns):
            row = cells[row_start:row_start + columns]
            lines.append("".join(Fore.GREEN + head.ljust(width) + Style.RESET_ALL for head, _ in row))
            lines.append("".join(Style.DIM + tail.ljust(width) + Style.RESET_ALL for _, tail in row))
        print("\n".join(lines), flush=True)
        print(flush=True)
