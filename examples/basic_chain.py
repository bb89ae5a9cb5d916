"""
basic_chain.py: minimal deferred example on an asyncio loop.

Demonstrates chaining, recovery from a rejection, aggregation and the
unhandled-rejection listener.

Usage:
    python examples/basic_chain.py
"""

import asyncio

from deferred import AsyncioScheduler, Deferred, DeferredRuntime, as_future


async def main() -> None:
    runtime = DeferredRuntime(scheduler=AsyncioScheduler())
    runtime.notifier.subscribe(lambda event: print(f"unhandled: {event.reason!r}"))

    def fetch_later(fulfill, reject):
        asyncio.get_running_loop().call_later(0.1, fulfill, 10)

    price = Deferred(fetch_later, runtime=runtime).then(lambda value: value * 2)
    fallback = Deferred.reject(ValueError("feed down"), runtime=runtime).catch(lambda _: 0)
    total = Deferred.all([price, fallback, 5], runtime=runtime).then(sum)

    print(await as_future(total))

    Deferred.reject("nobody is listening for this", runtime=runtime)
    await asyncio.sleep(0.05)


if __name__ == "__main__":
    asyncio.run(main())
