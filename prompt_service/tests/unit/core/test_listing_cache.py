import pytest

from prompt_service.core.listing_cache import (
    CacheTier,
    MemoryTier,
    PromptListingCache,
    RedisTier,
    TierResult,
)
from prompt_service.tests.stubs.fakes import FakeRedis, ManualClock

SNAPSHOT = b'[{"id":"p1"}]'


@pytest.fixture
def memory_only_cache(clock):
    return PromptListingCache(None, MemoryTier(ttl_seconds=60, clock=clock), clock=clock)


@pytest.mark.asyncio
async def test_connect_marks_redis_ready(prompt_cache, fake_redis):
    assert prompt_cache.available() is False

    assert await prompt_cache.connect() is True

    assert prompt_cache.available() is True
    assert fake_redis.ops("ping") == 1


@pytest.mark.asyncio
async def test_connect_failure_leaves_redis_unavailable(prompt_cache, fake_redis):
    fake_redis.fail = True

    assert await prompt_cache.connect() is False
    assert prompt_cache.available() is False


@pytest.mark.asyncio
async def test_set_then_get_uses_redis_with_ttl(prompt_cache, fake_redis):
    await prompt_cache.connect()

    assert await prompt_cache.set(SNAPSHOT) == CacheTier.REDIS
    read = await prompt_cache.get()

    assert read.hit
    assert read.tier == CacheTier.REDIS
    assert read.snapshot == SNAPSHOT
    assert fake_redis.ttls["prompts"] == 60


@pytest.mark.asyncio
async def test_redis_miss_does_not_consult_memory_tier(prompt_cache, fake_redis):
    await prompt_cache.connect()

    read = await prompt_cache.get()

    assert not read.hit
    assert read.tier == CacheTier.NONE


@pytest.mark.asyncio
async def test_redis_get_error_flips_availability_and_falls_through(prompt_cache, fake_redis):
    await prompt_cache.connect()
    await prompt_cache.set(SNAPSHOT)
    fake_redis.fail = True

    read = await prompt_cache.get()

    assert not read.hit
    assert prompt_cache.available() is False


@pytest.mark.asyncio
async def test_redis_set_error_skips_caching_this_round(prompt_cache, fake_redis):
    await prompt_cache.connect()
    fake_redis.fail = True

    assert await prompt_cache.set(SNAPSHOT) == CacheTier.NONE
    assert prompt_cache.available() is False

    # Nothing landed in the memory tier either
    fake_redis.fail = False
    assert not (await prompt_cache.get()).hit


@pytest.mark.asyncio
async def test_memory_tier_serves_while_redis_down(prompt_cache, fake_redis, clock):
    fake_redis.fail = True
    await prompt_cache.connect()

    assert await prompt_cache.set(SNAPSHOT) == CacheTier.MEMORY
    clock.advance(59)
    read = await prompt_cache.get()

    assert read.tier == CacheTier.MEMORY
    assert read.snapshot == SNAPSHOT


@pytest.mark.asyncio
async def test_memory_tier_expires_after_freshness_window(memory_only_cache, clock):
    await memory_only_cache.set(SNAPSHOT)
    clock.advance(60)

    assert not (await memory_only_cache.get()).hit


@pytest.mark.asyncio
async def test_no_redis_configured_uses_memory_tier(memory_only_cache):
    assert await memory_only_cache.connect() is False
    assert memory_only_cache.available() is False

    assert await memory_only_cache.set(SNAPSHOT) == CacheTier.MEMORY
    assert (await memory_only_cache.get()).snapshot == SNAPSHOT


@pytest.mark.asyncio
async def test_invalidate_clears_both_tiers(prompt_cache, fake_redis):
    fake_redis.fail = True
    await prompt_cache.connect()
    await prompt_cache.set(SNAPSHOT)  # memory tier
    fake_redis.fail = False
    fake_redis.store["prompts"] = SNAPSHOT  # stale redis entry

    await prompt_cache.invalidate()

    assert "prompts" not in fake_redis.store
    assert not (await prompt_cache.get()).hit


@pytest.mark.asyncio
async def test_invalidate_swallows_redis_errors(prompt_cache, fake_redis):
    await prompt_cache.connect()
    fake_redis.fail = True

    await prompt_cache.invalidate()  # must not raise

    assert prompt_cache.available() is False


@pytest.mark.asyncio
async def test_availability_rechecked_lazily_after_interval(prompt_cache, fake_redis, clock):
    fake_redis.fail = True
    await prompt_cache.connect()
    fake_redis.fail = False

    await prompt_cache.get()
    assert prompt_cache.available() is False
    assert fake_redis.ops("ping") == 1

    clock.advance(30)
    await prompt_cache.get()

    assert prompt_cache.available() is True
    assert fake_redis.ops("ping") == 2


@pytest.mark.asyncio
async def test_close_releases_redis_client(prompt_cache, fake_redis):
    await prompt_cache.connect()

    await prompt_cache.close()

    assert fake_redis.closed is True
    assert prompt_cache.available() is False


@pytest.mark.asyncio
async def test_redis_tier_reports_failures_as_results():
    redis = FakeRedis()
    tier = RedisTier(redis, key="prompts", ttl_seconds=60)
    redis.fail = True

    result = await tier.get()

    assert isinstance(result, TierResult)
    assert result.ok is False
    assert "get failed" in result.error


def test_memory_tier_clear():
    tier = MemoryTier(ttl_seconds=60, clock=ManualClock())
    tier.set(SNAPSHOT)
    tier.clear()
    assert tier.get() is None
