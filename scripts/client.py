#!/usr/bin/env python3
"""Interactive client that submits prompts to the relay and polls for the result.

Usage:
  AITEXT_URL=http://localhost:5166 python scripts/client.py

Each follow-up prompt carries the previous request id. Type 'exit' or 'quit' to stop.
"""
import asyncio
import os
from typing import Any, Dict, Optional

import httpx

BASE_URL = os.getenv("AITEXT_URL", "http://localhost:5166")
POLL_SECONDS = float(os.getenv("CLIENT_POLL_SECONDS", "5"))
TERMINAL = {"COMPLETE", "FAILED"}


async def submit(client: httpx.AsyncClient, prompt: str, previous_id: Optional[str] = None) -> str:
    res = await client.post("/api/generate", json={"prompt": prompt, "previous_id": previous_id})
    res.raise_for_status()
    return res.json()["id"]


async def wait_for_result(client: httpx.AsyncClient, job_id: str, poll_seconds: float = POLL_SECONDS,
                          on_poll=None) -> Dict[str, Any]:
    polls = 0
    while True:
        polls += 1
        res = await client.get(f"/api/status/{job_id}")
        res.raise_for_status()
        body = res.json()
        if on_poll:
            on_poll(polls, body)
        if body["status"] in TERMINAL:
            return body
        await asyncio.sleep(poll_seconds)


def _print_poll(polls: int, body: Dict[str, Any]):
    print(f"\r  poll #{polls} - status: {body['status']}", end="", flush=True)


async def run_client():
    print(f"client: connected to {BASE_URL}")
    previous_id = None
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        while True:
            prompt = (await asyncio.to_thread(input, "Enter your prompt: ")).strip()
            if not prompt or prompt.lower() in ("exit", "quit"):
                print("Goodbye!")
                return
            try:
                job_id = await submit(client, prompt, previous_id)
                print(f"  submitted: {job_id}")
                body = await wait_for_result(client, job_id, on_poll=_print_poll)
            except httpx.HTTPError as e:
                print(f"\nclient: request failed: {e}")
                continue
            print(f"\n[{body['status']}] {body['result']}\n")
            previous_id = job_id


if __name__ == "__main__":
    try:
        asyncio.run(run_client())
    except (KeyboardInterrupt, EOFError):
        print("client: exiting")
