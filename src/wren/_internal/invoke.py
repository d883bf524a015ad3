"""Call route and error handlers whether they are sync or async.

Site handlers are plain ``def`` (all file I/O is blocking and inline);
admin handlers that read a form body are ``async def``. The pipeline
calls both through ``invoke``.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
