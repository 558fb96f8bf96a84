"""Invoke helpers: call sync or async collaborators uniformly.

Render functions and data-source methods can be ``def`` or
``async def``. Any code that calls one goes through ``invoke`` so the
sync/async check lives in exactly one place.

Usage::

    from storefront._internal.invoke import invoke

    result = await invoke(render, "/product/42/", {})
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def render(url, query):
            return {"html": "<h1>Home</h1>"}

        # async: the coroutine is awaited
        async def render(url, query):
            products = await client.get_products(limit=20)
            return {"html": ..., "data": products}
    """
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
