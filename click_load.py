"""
click_load.py - simple async load script firing link clicks

Every request uses a visitor drawn from a small pool, so a share of the clicks
are repeats and must come back as alreadyClicked.

Usage:
  python click_load.py --base http://127.0.0.1:8000 --count 2000 --visitors 300 --concurrency 100
"""
import argparse
import asyncio
import random
import time
from datetime import datetime, timezone

import httpx

LINKS = {
    "apk": "https://example.com/downloads/app.apk",
    "ios": "https://apps.example.com/app/id000000",
    "web": "https://example.com/",
}


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


async def _register(client: httpx.AsyncClient, base: str) -> str:
    r = await client.post(f"{base}/api/register", timeout=10)
    r.raise_for_status()
    return r.json()["userId"]


async def _click_one(client: httpx.AsyncClient, base: str, visitor: str) -> str:
    link_id = random.choice(list(LINKS))
    payload = {"userId": visitor, "linkId": link_id, "linkUrl": LINKS[link_id]}
    try:
        r = await client.post(f"{base}/api/click", json=payload, timeout=10)
        r.raise_for_status()
        data = r.json()
    except httpx.HTTPError:
        return "failed"
    if data.get("success"):
        return "counted"
    if data.get("alreadyClicked"):
        return "duplicate"
    return "ignored"


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--visitors", type=int, default=300)
    parser.add_argument("--concurrency", type=int, default=100)
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    outcomes = {"counted": 0, "duplicate": 0, "ignored": 0, "failed": 0}

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limit) as client:
        visitors = await asyncio.gather(*(_register(client, args.base) for _ in range(args.visitors)))
        sem = asyncio.Semaphore(args.concurrency)

        async def _task():
            async with sem:
                outcome = await _click_one(client, args.base, random.choice(visitors))
                outcomes[outcome] += 1

        await asyncio.gather(*(_task() for _ in range(args.count)))

        stats = (await client.get(f"{args.base}/api/stats", timeout=10)).json().get("stats", {})

    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(
        f"OPS:   clicks={args.count}, counted={outcomes['counted']}, duplicate={outcomes['duplicate']}, "
        f"ignored={outcomes['ignored']}, failed={outcomes['failed']}"
    )
    print(f"STATS: {stats}")
    if dt > 0:
        print(f"TPS:   {args.count/dt:.1f} req/s")


if __name__ == "__main__":
    asyncio.run(main())
