import sys
import os
import argparse
import asyncio
import datetime
import aiofiles

# Ensure project root is in the path for core and persistence imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.simulator import CacheSimulator, Request
from persistence.backing_store import BackingStore


class TraceFormatError(ValueError):
    pass


def _parse_int(token, lineno):
    try:
        return int(token)
    except ValueError:
        raise TraceFormatError(f"line {lineno}: expected an integer, got {token!r}")


def parse_trace(lines):
    """
    Parse a request trace.

    The first line is "<capacity> <backing store path>"; every following
    line is "<key>" for a read or "<key> <value>" for a write. Blank
    lines are skipped.
    """
    capacity = None
    store_path = None
    requests = []

    for lineno, line in enumerate(lines, start=1):
        parts = line.split()
        if not parts:
            continue

        # --- HEADER ---
        if capacity is None:
            if len(parts) != 2:
                raise TraceFormatError(f"line {lineno}: expected '<capacity> <store path>'")
            capacity = _parse_int(parts[0], lineno)
            if capacity < 1:
                raise TraceFormatError(f"line {lineno}: capacity must be positive")
            store_path = parts[1]
            continue

        # --- REQUESTS ---
        if len(parts) == 1:
            requests.append(Request(_parse_int(parts[0], lineno)))
        elif len(parts) == 2:
            requests.append(Request(_parse_int(parts[0], lineno), _parse_int(parts[1], lineno)))
        else:
            raise TraceFormatError(f"line {lineno}: expected '<key>' or '<key> <value>'")

    if capacity is None:
        raise TraceFormatError("trace is empty")
    return capacity, store_path, requests


def render_report(sim: CacheSimulator):
    lines = [
        f"Cache Misses: {sim.miss_count()}",
        f"Total Time: {sim.total_time()}",
    ]
    lines.extend(sim.history())
    return "\n".join(lines) + "\n"


async def run_trace(trace_path, output_path="output.txt", seed=None):
    """
    Replay the trace at trace_path and write the report to output_path.
    With seed, the backing store is first rewritten to hold keys
    0..seed-1 mapped to themselves.
    """
    async with aiofiles.open(trace_path, mode='r') as f:
        lines = await f.readlines()

    capacity, store_path, requests = parse_trace(lines)

    if seed is not None:
        await BackingStore(store_path).seed((i, i) for i in range(seed))
        print(f"[Runner] Seeded {store_path} with keys 0..{seed - 1}")

    sim = CacheSimulator.from_store(capacity, store_path)
    now = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{now}] Runner: Replaying {len(requests)} requests (capacity {capacity})...")
    await sim.run(requests)

    async with aiofiles.open(output_path, mode='w') as f:
        await f.write(render_report(sim))
        await f.flush()

    print(f"[Runner] Report written to {output_path} ({sim.miss_count()} misses)")
    return sim


def build_parser():
    parser = argparse.ArgumentParser(description="Replay a request trace against an LRU cache.")
    parser.add_argument("trace", help="trace file: '<capacity> <store path>' header, then one request per line")
    parser.add_argument("-o", "--output", default="output.txt", help="report file (default: output.txt)")
    parser.add_argument("--seed", type=int, default=None, metavar="N",
                        help="rewrite the backing store with keys 0..N-1 mapped to themselves first")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(run_trace(args.trace, args.output, seed=args.seed))
    except (TraceFormatError, UnicodeDecodeError) as e:
        print(f"[Error] Failed to parse trace file: {e}")
        return 1
    except OSError as e:
        print(f"[Error] Failed to read or write file: {e}")
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
