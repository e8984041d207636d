"""Slow weather forecast source for demonstration purposes."""

import asyncio
import random
from datetime import date, timedelta

SUMMARIES = [
    "Freezing", "Bracing", "Chilly", "Cool", "Mild",
    "Warm", "Balmy", "Hot", "Sweltering", "Scorching",
]

call_count: dict[str, int] = {"get_forecast": 0}

# Set to True to make the origin return failed results
origin_degraded = False


def reset_call_count() -> None:
    """Reset the call counter."""
    for key in call_count:
        call_count[key] = 0


def is_valid_result(result: dict) -> bool:
    """Only successful origin results may be cached."""
    return bool(result.get("is_valid"))


async def get_forecast(city_id: int, days: int = 5) -> dict:
    """Simulate an expensive upstream forecast call."""
    call_count["get_forecast"] += 1
    await asyncio.sleep(0.5)

    if origin_degraded:
        return {"is_valid": False, "error": "upstream unavailable", "data": None}

    today = date.today()
    return {
        "is_valid": True,
        "error": None,
        "data": [
            {
                "city_id": city_id,
                "date": today + timedelta(days=offset),
                "temperature_c": random.randint(-20, 55),
                "summary": random.choice(SUMMARIES),
            }
            for offset in range(1, days + 1)
        ],
    }
