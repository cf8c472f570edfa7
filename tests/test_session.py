import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import concurrent.futures
import pytest

import session as session_mod
from session import CalculatorSession, Notification, page_bounds, page_count
from groups import Combination


class DummyExecutor:
    """Runs submitted work inline but records the session state at submit time."""

    def __init__(self, session_ref=None):
        self.seen_loading = []
        self.session_ref = session_ref

    def submit(self, fn, *args, **kwargs):
        if self.session_ref is not None:
            self.seen_loading.append(self.session_ref().is_loading)
        fut = concurrent.futures.Future()
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as e:
            fut.set_exception(e)
        return fut


@pytest.fixture
def make_session():
    created = []

    def _make(**kwargs):
        holder = {}
        executor = DummyExecutor(lambda: holder["s"])
        s = CalculatorSession(executor=executor, **kwargs)
        holder["s"] = s
        created.append(s)
        return s, executor

    yield _make
    for s in created:
        s.close()


def test_page_count():
    assert page_count(0, 12) == 0
    assert page_count(1, 12) == 1
    assert page_count(12, 12) == 1
    assert page_count(13, 12) == 2
    with pytest.raises(ValueError):
        page_count(10, 0)


def test_page_bounds():
    assert page_bounds(1, 12) == (0, 12)
    assert page_bounds(3, 5) == (10, 15)


def test_busy_state_committed_before_search(make_session):
    states = []
    s, executor = make_session(on_change=lambda sess: states.append((sess.is_loading, list(sess.combinations))))
    s.combinations = [Combination("X", "24")]
    future = s.calculate("11")
    assert future.result() is s
    assert executor.seen_loading == [True]
    assert states[0] == (True, [])
    assert states[-1][0] is False
    assert s.is_loading is False
    assert [c.letters for c in s.combinations] == ["AA", "K"]
    assert s.execution_time >= 0
    assert s.truncated is False
    assert s.total_available == 2


def test_invalid_input_notifies_and_keeps_previous_state(make_session):
    s, executor = make_session()
    assert s.calculate("12a3") is None
    assert executor.seen_loading == []
    assert s.is_loading is False
    assert s.combinations == []
    assert s.notifications[-1] == Notification(
        "Invalid input", "Please enter valid digits (numbers only).", "destructive"
    )


def test_truncation_notification(make_session):
    s, _ = make_session(cap=5)
    s.calculate("1" * 10).result()
    assert len(s.combinations) == 5
    assert s.truncated is True
    assert s.total_available == 89
    assert s.notifications[-1].title == "Limit reached"
    assert s.notifications[-1].variant == "destructive"


def test_empty_input_is_not_an_error(make_session):
    s, _ = make_session()
    s.calculate("").result()
    assert s.combinations == []
    assert s.notifications == []
    assert s.total_pages == 0
    assert s.change_page(5) == 1


def test_pagination_clamps(make_session):
    s, _ = make_session(page_size=4)
    s.calculate("1" * 6).result()  # 13 combinations
    assert s.total_pages == 4
    assert len(s.page_items) == 4
    assert s.change_page(0) == 1
    assert s.change_page(99) == 4
    assert len(s.page_items) == 1
    assert s.next_page() == 4
    assert s.previous_page() == 3
    assert s.page_items == s.combinations[8:12]


def test_new_calculation_resets_page(make_session):
    s, _ = make_session(page_size=2)
    s.calculate("1111").result()
    s.change_page(3)
    s.calculate("26").result()
    assert s.current_page == 1


def test_run_example(make_session):
    s, _ = make_session()
    s.run_example().result()
    assert s.digits == "1232345"
    assert len(s.combinations) == 6


def test_clear(make_session):
    s, _ = make_session()
    s.calculate("1111").result()
    s.clear()
    assert s.digits == ""
    assert s.combinations == []
    assert s.execution_time == 0
    assert s.current_page == 1
    assert s.is_loading is False


def test_copy_letters(make_session):
    s, _ = make_session()
    s.calculate("11").result()
    assert s.copy_letters(1) == "K"
    assert s.notifications[-1] == Notification("Copied!", '"K" copied.')
    with pytest.raises(IndexError):
        s.copy_letters(2)
    with pytest.raises(IndexError):
        s.copy_letters(-1)


def test_summary(make_session):
    s, _ = make_session(page_size=2)
    s.calculate("11").result()
    s.execution_time = 1.5
    assert s.summary() == "Found 2 combination(s) in 1.50ms."
    s.calculate("111").result()
    s.execution_time = 0.25
    assert s.summary() == "Found 3 combination(s) in 0.25ms. Page 1 of 2."


def test_default_executor_runs_in_background():
    with CalculatorSession() as s:
        s.calculate("1232345").result(timeout=10)
        assert len(s.combinations) == 6
    assert s._executor._shutdown


def test_invalid_page_size():
    with pytest.raises(ValueError):
        CalculatorSession(page_size=0, executor=DummyExecutor())


def test_session_uses_enumerator(monkeypatch, make_session):
    calls = []

    def fake_enumerate(digits, cap):
        calls.append((digits, cap))
        return [Combination("A", "1")], False

    monkeypatch.setattr(session_mod, "enumerate_combinations", fake_enumerate)
    s, _ = make_session(cap=7)
    s.calculate("1").result()
    assert calls == [("1", 7)]


@pytest.mark.parametrize("cap", [0, -3, 2.5, False])
def test_invalid_cap(cap):
    with pytest.raises(ValueError):
        CalculatorSession(cap=cap, executor=DummyExecutor())


def test_failed_run_clears_busy_state(monkeypatch, make_session):
    states = []

    def failing_enumerate(digits, cap):
        raise ValueError("boom")

    monkeypatch.setattr(session_mod, "enumerate_combinations", failing_enumerate)
    s, _ = make_session(on_change=lambda sess: states.append(sess.is_loading))
    future = s.calculate("11")
    assert isinstance(future.exception(), ValueError)
    assert s.is_loading is False
    assert states == [True, False]


def test_clear_drops_notifications(make_session):
    s, _ = make_session()
    s.calculate("11").result()
    s.copy_letters(0)
    assert s.notifications
    s.clear()
    assert s.notifications == []


def test_notifications_are_bounded(make_session):
    s, _ = make_session()
    s.calculate("11").result()
    for _ in range(session_mod.MAX_NOTIFICATIONS + 5):
        s.copy_letters(1)
    s.copy_letters(0)
    assert len(s.notifications) == session_mod.MAX_NOTIFICATIONS
    assert s.notifications[-1] == Notification("Copied!", '"AA" copied.')
