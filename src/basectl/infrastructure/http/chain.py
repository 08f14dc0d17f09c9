# src/basectl/infrastructure/http/chain.py
# Copyright (c) Basectl.
# SPDX-License-Identifier: MIT
"""Single-pass middleware chain.

Summary:
    Composes ``async (ctx, call_next)`` middleware into one middleware, the
    way Koa's ``compose`` does. Each stage decides whether and when to run the
    rest of the chain by awaiting ``call_next()``; code after the await sees
    the downstream effects on the context.

Contract:
    • Stages run in list order; the last stage's ``call_next`` runs the
      continuation passed to the composed middleware (or does nothing).
    • A stage may call its ``call_next`` at most once. A second call raises
      ``RuntimeError``.
    • Errors propagate back up through the awaiting stages.
"""

from __future__ import annotations

from collections.abc import Sequence

from basectl.application.interfaces.context_port import (
    Continuation,
    Middleware,
    RequestContextPort,
)

__all__ = ["compose"]


def compose(middleware: Sequence[Middleware]) -> Middleware:
    """Compose ``middleware`` into a single middleware callable.

    Args:
        middleware: Stages in execution order.

    Returns:
        ``async (ctx, call_next=None) -> None`` running the whole chain.

    Raises:
        TypeError: If any stage is not callable.
    """
    stages = tuple(middleware)
    for stage in stages:
        if not callable(stage):
            raise TypeError(f"middleware must be callable, got {type(stage).__name__}")

    async def composed(ctx: RequestContextPort, call_next: Continuation | None = None) -> None:
        last_index = -1

        async def run(index: int) -> None:
            nonlocal last_index
            if index <= last_index:
                raise RuntimeError("next() called multiple times")
            last_index = index
            if index == len(stages):
                if call_next is not None:
                    await call_next()
                return

            async def downstream() -> None:
                await run(index + 1)

            await stages[index](ctx, downstream)

        await run(0)

    return composed
