#!/usr/bin/env python3
"""
Chain benchmark utility for settlement throughput characterization.

Usage examples:
  PYTHONPATH=src python scripts/chain_benchmark.py --backend inmemory
  PYTHONPATH=src python scripts/chain_benchmark.py --backend asyncio --chains 500 --depth 20
"""

from __future__ import annotations

import argparse
import asyncio
import statistics
import time

from deferred import (
    AsyncioScheduler,
    Deferred,
    DeferredRuntime,
    InMemoryScheduler,
    as_future,
)


def _build_chains(runtime: DeferredRuntime, *, chains: int, depth: int) -> list[Deferred]:
    tails: list[Deferred] = []
    for index in range(chains):
        current = Deferred.resolve(index, runtime=runtime)
        for _ in range(depth):
            current = current.then(lambda value: value + 1)
        tails.append(current)
    return tails


def _report(*, backend: str, chains: int, depth: int, samples: list[float]) -> None:
    reactions = chains * depth
    p50 = statistics.median(samples)
    best = min(samples)
    print(f"backend={backend}")
    print(f"chains={chains}")
    print(f"depth={depth}")
    print(f"rounds={len(samples)}")
    print(f"round_p50_ms={p50 * 1000:.2f}")
    print(f"round_best_ms={best * 1000:.2f}")
    print(f"reactions_per_s={reactions / p50 if p50 > 0 else 0.0:.0f}")


def run_inmemory(*, chains: int, depth: int, rounds: int) -> list[float]:
    samples: list[float] = []
    for _ in range(rounds):
        runtime = DeferredRuntime(scheduler=InMemoryScheduler())
        started = time.perf_counter()
        tails = _build_chains(runtime, chains=chains, depth=depth)
        aggregate = Deferred.all(tails, runtime=runtime)
        runtime.scheduler.run_until_idle(max_turns=chains * (depth + 4) + 16)
        samples.append(time.perf_counter() - started)
        assert aggregate.result()[-1] == chains - 1 + depth
    return samples


async def run_asyncio(*, chains: int, depth: int, rounds: int) -> list[float]:
    samples: list[float] = []
    for _ in range(rounds):
        runtime = DeferredRuntime(scheduler=AsyncioScheduler())
        started = time.perf_counter()
        tails = _build_chains(runtime, chains=chains, depth=depth)
        values = await asyncio.wait_for(
            as_future(Deferred.all(tails, runtime=runtime)), timeout=120
        )
        samples.append(time.perf_counter() - started)
        assert values[-1] == chains - 1 + depth
    return samples


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deferred chain benchmark utility")
    parser.add_argument("--backend", choices=("inmemory", "asyncio"), default="inmemory")
    parser.add_argument("--chains", type=int, default=200)
    parser.add_argument("--depth", type=int, default=10)
    parser.add_argument("--rounds", type=int, default=5)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.backend == "inmemory":
        samples = run_inmemory(chains=args.chains, depth=args.depth, rounds=args.rounds)
    else:
        samples = asyncio.run(
            run_asyncio(chains=args.chains, depth=args.depth, rounds=args.rounds)
        )
    _report(backend=args.backend, chains=args.chains, depth=args.depth, samples=samples)


if __name__ == "__main__":
    main()
