import asyncio
import warnings
import sys


def _await(coro):
    """Create a new event loop, run the coroutine, then close the event loop."""
    loop = asyncio.new_event_loop()

    with warnings.catch_warnings(record=True) as warns:
        warnings.simplefilter('always', RuntimeWarning)
        try:
            ret = loop.run_until_complete(coro)
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

        # e.g., "coroutine ... was never awaited"
        runtime_warns = [warn for warn in warns if issubclass(warn.category, RuntimeWarning)]
        for warn in runtime_warns:
            print(warn.message, file=sys.stderr)

        if runtime_warns:
            raise RuntimeError

        return ret


def awaiter(func):
    def sync_func(*args, **kwargs):
        return _await(func(*args, **kwargs))

    return sync_func
