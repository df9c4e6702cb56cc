import pytest

from app import rate_limiter


@pytest.fixture(autouse=True)
def memory_only(monkeypatch):
    monkeypatch.setattr("app.config.REDIS_URL", None)
    monkeypatch.setattr(rate_limiter, "memory_cache", {})
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", 0)


@pytest.fixture
def clock(monkeypatch):
    now = [1_000_000.0]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])
    return now


def test_memory_window_allows_up_to_limit():
    results = [rate_limiter.check_rate_limit("intake:1.2.3.4", 3, 60)[0] for _ in range(4)]

    assert results == [True, True, True, False]


def test_limits_are_per_key():
    for _ in range(2):
        rate_limiter.check_rate_limit("intake:1.1.1.1", 2, 60)

    assert rate_limiter.check_rate_limit("intake:1.1.1.1", 2, 60)[0] is False
    assert rate_limiter.check_rate_limit("intake:2.2.2.2", 2, 60)[0] is True


def test_expired_windows_are_swept_from_memory(clock):
    for i in range(500):
        rate_limiter.check_rate_limit(f"intake:10.0.{i // 256}.{i % 256}", 5, 10)
    assert len(rate_limiter.memory_cache) == 500

    clock[0] += 10_000
    rate_limiter.check_rate_limit("intake:192.168.0.1", 5, 10)

    assert list(rate_limiter.memory_cache) == ["intake:192.168.0.1"]


def test_sweep_runs_at_most_once_per_interval(clock):
    rate_limiter.check_rate_limit("intake:1.1.1.1", 5, 1)
    clock[0] += 2
    rate_limiter.check_rate_limit("intake:2.2.2.2", 5, 1)

    assert "intake:1.1.1.1" in rate_limiter.memory_cache

    clock[0] += rate_limiter.MEMORY_CACHE_CLEANUP_INTERVAL
    rate_limiter.check_rate_limit("intake:3.3.3.3", 5, 1)

    assert list(rate_limiter.memory_cache) == ["intake:3.3.3.3"]


def test_intake_endpoint_returns_429_with_retry_after(client, make_psychiatrist, monkeypatch):
    monkeypatch.setattr("app.config.RATE_LIMIT_ENABLED", True)
    doctor = make_psychiatrist()
    payload = {
        "psychiatrist_id": doctor.id,
        "patient_name": "Alice",
        "patient_email": "alice@example.com",
    }

    statuses = [client.post("/appointments", json=payload).status_code for _ in range(11)]

    assert statuses[:10] == [201] * 10
    assert statuses[10] == 429
    response = client.post("/appointments", json=payload)
    assert "error" in response.json()
    assert int(response.headers["Retry-After"]) > 0
