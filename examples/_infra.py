"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine

from kungfu import Ok, Error, Result


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def show(label: str, result: Result[object, object]) -> None:
    match result:
        case Ok(value):
            print(f"   {label} → {value}")
        case Error(e):
            print(f"   {label} → Error: {e}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
