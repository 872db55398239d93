from __future__ import annotations

from contextvars import ContextVar, Token


class QueryTimer:
    """Per-request SQL time, mutated in place so worker-thread context copies share it."""

    __slots__ = ("elapsed_ms",)

    def __init__(self) -> None:
        self.elapsed_ms = 0.0


_current_timer: ContextVar[QueryTimer | None] = ContextVar("query_timer", default=None)


def begin_request_timing() -> Token:
    return _current_timer.set(QueryTimer())


def end_request_timing(token: Token) -> None:
    _current_timer.reset(token)


def is_timing() -> bool:
    return _current_timer.get() is not None


def record_query_time(elapsed_ms: float) -> None:
    timer = _current_timer.get()
    if timer is None:
        return
    timer.elapsed_ms += elapsed_ms


def query_time_ms() -> float | None:
    timer = _current_timer.get()
    return timer.elapsed_ms if timer is not None else None
