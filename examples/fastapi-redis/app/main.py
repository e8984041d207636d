"""FastAPI + Redis + cacheaside example."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app import forecasts

from cacheaside import (
    CacheAsideService,
    CacheConfig,
    DefaultKeyBuilder,
    RedisStoreClient,
    StoreUnavailableError,
)

logging.basicConfig(level=logging.INFO)

# Reads CACHEASIDE_REDIS_URL, CACHEASIDE_CACHE_DURATION_MINUTES, ...
cache_config = CacheConfig.from_env()
store = RedisStoreClient.from_config(cache_config)
cache_service = CacheAsideService(
    store=store,
    config=cache_config,
    is_valid=forecasts.is_valid_result,
)
keys = DefaultKeyBuilder(prefix="forecast")


@asynccontextmanager
async def lifespan(app: FastAPI):
    print(f"[STARTUP] Using Redis at {cache_config.redis_url}")
    yield
    print("[SHUTDOWN] Closing Redis connection")
    await store.close()


app = FastAPI(
    title="cacheaside Example API",
    description="Weather forecasts behind a resilient cache-aside layer",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/forecasts/{city_id}")
async def get_forecast(city_id: int, no_cache: bool = False, allow_stale: bool = True):
    result = await cache_service.get_or_set_result(
        keys.build("city", city_id),
        lambda: forecasts.get_forecast(city_id),
        disable_cache=no_cache,
        use_stale_on_invalid=allow_stale,
    )
    return {"outcome": result.outcome.value, "forecast": result.value}


@app.post("/forecasts/{city_id}/expire")
async def expire_forecast(city_id: int):
    expired = await cache_service.expire(keys.build("city", city_id))
    return {"expired": expired}


@app.post("/forecasts/expire")
async def expire_all_forecasts():
    report = await cache_service.expire_by_prefix(keys.build_prefix("city"))
    return {
        "matched": len(report.matched),
        "expired": len(report.expired),
        "skipped": report.skipped,
        "failed": sorted(report.failed),
        "error": str(report.error) if report.error else None,
    }


@app.post("/origin/degraded")
async def set_origin_degraded(degraded: bool = True):
    forecasts.origin_degraded = degraded
    return {"degraded": degraded}


@app.get("/health")
async def health_check():
    try:
        await store.ping()
        redis_status = "healthy"
    except StoreUnavailableError as e:
        redis_status = f"unhealthy: {e}"

    return {
        "status": "healthy",
        "redis": redis_status,
        "cache_enabled": cache_config.enabled,
    }


@app.get("/cache/stats")
async def cache_stats():
    return {
        "stats": cache_service.stats,
        "origin_calls": forecasts.call_count,
        "config": {
            "cache_duration_minutes": cache_config.cache_duration_minutes,
            "absolute_expiration_minutes": cache_config.absolute_expiration_minutes,
            "key_prefix": cache_config.key_prefix,
        },
    }


@app.post("/cache/stats/reset")
async def reset_stats():
    cache_service.reset_stats()
    forecasts.reset_call_count()
    return {"status": "reset"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
