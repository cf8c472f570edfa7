import math
import time
import concurrent.futures
from typing import Callable, List, NamedTuple, Optional
from colorama import Fore

from utils import MAX_COMBINATIONS, ITEMS_PER_PAGE, DEFAULT_DIGITS, EXAMPLE_DIGITS, log_with_time, vlog
from groups import Combination, InvalidInputError, count_combinations, validate_digits
from enumerator import enumerate_combinations


# Oldest notifications are dropped past this many
MAX_NOTIFICATIONS = 20


class Notification(NamedTuple):
    title: str
    description: str
    variant: str = "default"


def page_count(size: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return math.ceil(size / page_size)


def page_bounds(page: int, page_size: int):
    """Return the ``[start, end)`` slice of the 1-based ``page``."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    start = (page - 1) * page_size
    return start, start + page_size


class CalculatorSession:
    """State of one calculator screen.

    Holds the current input, the last result set and the page being viewed.
    ``calculate`` marks the session busy and tells ``on_change`` about it
    before the blocking search is handed to the executor, so a front end can
    draw its loading state first. The executor defaults to a private
    single-worker thread pool.
    """

    def __init__(self, cap=MAX_COMBINATIONS, page_size=ITEMS_PER_PAGE, digits=DEFAULT_DIGITS,
                 executor=None, on_change: Optional[Callable[["CalculatorSession"], None]] = None):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        if isinstance(cap, bool) or not isinstance(cap, int) or cap < 1:
            raise ValueError(f"cap must be a positive integer, got {cap!r}")
        self.cap = cap
        self.page_size = page_size
        self.digits = digits
        self.combinations: List[Combination] = []
        self.truncated = False
        self.total_available = None
        self.is_loading = False
        self.execution_time = 0.0
        self.current_page = 1
        self.notifications: List[Notification] = []
        self.on_change = on_change
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(max_workers=1)

    # ---------- Lifecycle ----------
    def close(self):
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ---------- Notifications ----------
    def notify(self, title, description, variant="default"):
        note = Notification(title, description, variant)
        self.notifications.append(note)
        del self.notifications[:-MAX_NOTIFICATIONS]
        color = Fore.RED if variant == "destructive" else Fore.GREEN
        log_with_time(f"{title}: {description}", color=color)
        return note

    def _changed(self):
        if self.on_change is not None:
            self.on_change(self)

    # ---------- Calculation ----------
    def calculate(self, digits=None):
        """Validate ``digits`` (default: the current input) and run the search.

        Returns the future of the deferred run, or None if the input was
        rejected. The future resolves to this session once its results,
        timing and busy flag have been stored.
        """
        if digits is not None:
            self.digits = digits
        try:
            validate_digits(self.digits)
        except InvalidInputError:
            self.notify("Invalid input", "Please enter valid digits (numbers only).", "destructive")
            self.is_loading = False
            self._changed()
            return None

        self.is_loading = True
        self.combinations = []
        self.truncated = False
        self.total_available = None
        self.current_page = 1
        self._changed()
        return self._executor.submit(self._run, self.digits)

    def _run(self, digits):
        t0 = time.time()
        try:
            results, truncated = enumerate_combinations(digits, self.cap)
        except ValueError:
            self.is_loading = False
            self._changed()
            raise
        elapsed_ms = (time.time() - t0) * 1000.0
        self.combinations = results
        self.truncated = truncated
        self.total_available = count_combinations(digits) if truncated else len(results)
        self.execution_time = elapsed_ms
        self.is_loading = False
        vlog(f"Search for {digits!r} finished in {elapsed_ms:.2f}ms")
        if truncated:
            self.notify(
                "Limit reached",
                f"Calculation stopped after {self.cap:,} combinations to keep things responsive.",
                "destructive",
            )
        self._changed()
        return self

    def run_example(self):
        return self.calculate(EXAMPLE_DIGITS)

    def clear(self):
        self.digits = ""
        self.combinations = []
        self.notifications = []
        self.truncated = False
        self.total_available = None
        self.execution_time = 0.0
        self.current_page = 1
        self.is_loading = False
        self._changed()

    # ---------- Pagination ----------
    @property
    def total_pages(self) -> int:
        return page_count(len(self.combinations), self.page_size)

    @property
    def page_items(self) -> List[Combination]:
        start, end = page_bounds(self.current_page, self.page_size)
        return self.combinations[start:end]

    def change_page(self, page: int) -> int:
        self.current_page = max(1, min(page, max(self.total_pages, 1)))
        return self.current_page

    def next_page(self) -> int:
        return self.change_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.change_page(self.current_page - 1)

    # ---------- Presentation helpers ----------
    def copy_letters(self, index: int) -> str:
        if not 0 <= index < len(self.combinations):
            raise IndexError(f"No combination at index {index}")
        letters = self.combinations[index].letters
        self.notify("Copied!", f'"{letters}" copied.')
        return letters

    def summary(self) -> str:
        text = f"Found {len(self.combinations):,} combination(s) in {self.execution_time:.2f}ms."
        if self.total_pages > 1:
            text += f" Page {self.current_page} of {self.total_pages:,}."
        return text
