"""Operation context and timing for profile services.

Every service entry point is decorated with ``@traced("<op>")``. The
decorator always binds ``op`` into structlog's context variables, so log
lines emitted while the operation runs (through structlog or stdlib
``logging``) carry it, along with call arguments such as ``user_id``.

Timing is off by default. With ``--verbose`` each operation builds a span
tree of its stages (``validate``, ``check_email``, ``persist``), the root
span records the outcome (``ok`` or the error code), and the tree is
attached as ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from profilectl.services.result import ServiceResult

_timing_enabled: ContextVar[bool] = ContextVar("_timing_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)

log = structlog.get_logger("profilectl.telemetry")


@dataclass
class Span:
    """Timing of one operation or one of its stages."""

    name: str
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    outcome: str | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.outcome is not None:
            data["outcome"] = self.outcome
        if self.annotations:
            data["annotations"] = self.annotations
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@contextmanager
def trace_span(stage: str) -> Generator[Span | None]:
    """Time one stage of the running operation; yields None when timing is off."""
    parent = _current_span.get() if _timing_enabled.get() else None
    if parent is None:
        yield None
        return

    child = Span(name=stage)
    parent.children.append(child)
    token = _current_span.set(child)
    try:
        yield child
    finally:
        child.end()
        _current_span.reset(token)


_P = ParamSpec("_P")


def _outcome(result: ServiceResult) -> str:
    if result.ok:
        return "ok"
    return result.error.code if result.error else "error"


def traced(
    op: str,
    *,
    bind: tuple[str, ...] = (),
) -> Callable[[Callable[_P, ServiceResult]], Callable[_P, ServiceResult]]:
    """Run a service method as operation *op*.

    Arguments named in *bind* are added to the log context next to ``op``.

    Usage::

        class ProfileQueryService(BaseService):
            @traced("get_profile", bind=("user_id",))
            def get(self, user_id: str) -> ServiceResult: ...
    """

    def decorator(func: Callable[_P, ServiceResult]) -> Callable[_P, ServiceResult]:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
            context: dict[str, Any] = {"op": op}
            if bind:
                arguments = signature.bind_partial(*args, **kwargs).arguments
                context.update({name: arguments[name] for name in bind if name in arguments})
            with structlog.contextvars.bound_contextvars(**context):
                if not _timing_enabled.get():
                    return func(*args, **kwargs)
                return _run_timed(op, func, *args, **kwargs)

        return wrapper

    return decorator


def _run_timed(
    op: str,
    func: Callable[_P, ServiceResult],
    *args: _P.args,
    **kwargs: _P.kwargs,
) -> ServiceResult:
    span = Span(name=op)
    token = _current_span.set(span)
    try:
        result = func(*args, **kwargs)
    except Exception:
        span.end()
        log.debug("span.complete", outcome="exception")
        raise
    finally:
        _current_span.reset(token)

    span.end()
    span.outcome = _outcome(result)
    log.debug(
        "span.complete",
        outcome=span.outcome,
        duration_ms=round(span.duration_ms, 2),
        stages=[child.name for child in span.children],
    )
    meta = {**(result.meta or {}), "telemetry": span.to_dict()}
    return result.model_copy(update={"meta": meta})


def enable_telemetry() -> None:
    """Turn stage timing on (done by the CLI context in verbose mode)."""
    _timing_enabled.set(True)


def disable_telemetry() -> None:
    _timing_enabled.set(False)


def get_current_span() -> Span | None:
    """The span of the running operation or stage, or None when timing is off."""
    if not _timing_enabled.get():
        return None
    return _current_span.get()
