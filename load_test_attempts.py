"""
Load test for the climbing comp attempt ledger.
Simulates many arbiter taps landing on the same few (participant, block)
pairs at once, then checks attempt numbers came out as 1..n with no gaps
or duplicates.
"""

import asyncio
import random
import time
import aiohttp

# -----------------------------
# CONFIG - ADJUST IF NEEDED
# -----------------------------
BASE_URL = "http://127.0.0.1:5000"

# Seeded arbiter (see seed_users.py)
ARBITER_EMAIL = "arbiter@test.com"

# Only hammer this many participants so pairs collide
MAX_PARTICIPANTS = 3

# Total POST requests to send
TOTAL_REQUESTS = 600

# How many run simultaneously
MAX_CONCURRENT = 50


# -----------------------------
# Load test functions
# -----------------------------
async def add_attempt(session, user_id, block_id):
    try:
        async with session.post(f"{BASE_URL}/api/attempts/{user_id}/{block_id}") as resp:
            text = await resp.text()
            if resp.status != 201:
                print(f"[ERROR {resp.status}] user={user_id} block={block_id} :: {text[:200]}")
            return resp.status
    except Exception as e:
        print(f"[EXCEPTION] {e} :: user={user_id} block={block_id}")
        return None


async def worker(name, session, task_queue):
    while True:
        item = await task_queue.get()
        if item is None:
            task_queue.task_done()
            break

        user_id, block_id = item
        await add_attempt(session, user_id, block_id)
        task_queue.task_done()


async def check_numbering(session, user_ids):
    bad = 0
    for user_id in user_ids:
        async with session.get(f"{BASE_URL}/api/attempts/{user_id}") as resp:
            card = (await resp.json())["blocks"]

        for row in card:
            numbers = [a["attempt_number"] for a in row["attempts"]]
            if numbers != list(range(1, len(numbers) + 1)):
                bad += 1
                print(f"[BAD NUMBERING] user={user_id} block={row['block']['number']} -> {numbers}")
    return bad


async def main():
    jar = aiohttp.CookieJar(unsafe=True)  # session cookie on 127.0.0.1

    async with aiohttp.ClientSession(cookie_jar=jar) as session:
        async with session.post(f"{BASE_URL}/api/auth/login", json={"email": ARBITER_EMAIL}) as resp:
            if resp.status != 200:
                print(f"Login failed ({resp.status}); run seed_users.py first")
                return

        async with session.get(f"{BASE_URL}/api/participants") as resp:
            participants = (await resp.json())["participants"][:MAX_PARTICIPANTS]
        async with session.get(f"{BASE_URL}/api/blocks/finals") as resp:
            finals = (await resp.json())["blocks"]

        if not participants or not finals:
            print("Need at least one participant and one finals block")
            return

        user_ids = [p["id"] for p in participants]
        block_ids = [b["id"] for b in finals]

        task_queue = asyncio.Queue()

        # Generate all simulated requests
        for _ in range(TOTAL_REQUESTS):
            await task_queue.put((random.choice(user_ids), random.choice(block_ids)))

        # Add sentinel None tasks to close workers
        for _ in range(MAX_CONCURRENT):
            await task_queue.put(None)

        workers = [
            asyncio.create_task(worker(f"worker-{i}", session, task_queue))
            for i in range(MAX_CONCURRENT)
        ]

        print(f"Sending {TOTAL_REQUESTS} requests with concurrency {MAX_CONCURRENT}...")
        start = time.time()

        await task_queue.join()
        end = time.time()

        for w in workers:
            await w

        print(f"Completed in {end - start:.2f} seconds")

        bad = await check_numbering(session, user_ids)
        print("Numbering OK" if not bad else f"{bad} pair(s) with bad numbering")


if __name__ == "__main__":
    asyncio.run(main())
