#!/usr/bin/env python3
"""Script to verify caching against a running example server."""

import asyncio

import httpx

BASE_URL = "http://localhost:8000"


async def get_forecast(client: httpx.AsyncClient, city_id: int, **params) -> dict:
    response = await client.get(f"{BASE_URL}/forecasts/{city_id}", params=params)
    return response.json()


async def origin_calls(client: httpx.AsyncClient) -> int:
    response = await client.get(f"{BASE_URL}/cache/stats")
    return response.json()["origin_calls"]["get_forecast"]


async def main() -> None:
    async with httpx.AsyncClient(timeout=10) as client:
        await client.post(f"{BASE_URL}/cache/stats/reset")
        await client.post(f"{BASE_URL}/origin/degraded", params={"degraded": False})
        await client.post(f"{BASE_URL}/forecasts/expire")

        first = await get_forecast(client, 1)
        second = await get_forecast(client, 1)
        print(f"1st call: {first['outcome']}, 2nd call: {second['outcome']}")
        assert second["outcome"] == "hit"
        assert await origin_calls(client) == 1

        await client.post(f"{BASE_URL}/forecasts/1/expire")
        reloaded = await get_forecast(client, 1)
        print(f"after expire: {reloaded['outcome']}")
        assert reloaded["outcome"] == "miss_loaded"

        await client.post(f"{BASE_URL}/forecasts/expire")
        await client.post(f"{BASE_URL}/origin/degraded", params={"degraded": True})
        stale = await get_forecast(client, 1)
        print(f"origin degraded: {stale['outcome']}")
        assert stale["outcome"] == "stale_served"
        assert stale["forecast"]["is_valid"] is True

        await client.post(f"{BASE_URL}/origin/degraded", params={"degraded": False})
        print("All checks passed")


if __name__ == "__main__":
    asyncio.run(main())
