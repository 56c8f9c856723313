"""
Alkitu Site - Form Rate Limiter Tests
"""
import pytest

from alkitu.services.rate_limiter import FixedWindowRateLimiter


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return FixedWindowRateLimiter(max_requests=3, window_seconds=3600, clock=clock, rng=lambda: 1.0)


class TestFixedWindowRateLimiter:
    """Fixed window counting per identifier"""

    def test_first_request_opens_window(self, limiter, clock):
        result = limiter.check('1.2.3.4')

        assert result.allowed == True
        assert result.count == 1
        assert result.remaining == 2
        assert result.reset_time == clock.now + 3600

    def test_rejects_request_after_limit(self, limiter):
        results = [limiter.check('1.2.3.4') for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert results[-1].count == 4
        assert results[-1].remaining == 0

    def test_identifiers_are_independent(self, limiter):
        for _ in range(3):
            limiter.check('1.2.3.4')

        assert limiter.check('1.2.3.4').allowed == False
        assert limiter.check('5.6.7.8').allowed == True

    def test_window_expiry_starts_new_window(self, limiter, clock):
        for _ in range(4):
            limiter.check('1.2.3.4')

        clock.now += 3600
        result = limiter.check('1.2.3.4')

        assert result.allowed == True
        assert result.count == 1

    def test_retry_after_counts_down(self, limiter, clock):
        for _ in range(3):
            limiter.check('1.2.3.4')
        clock.now += 600.5
        result = limiter.check('1.2.3.4')

        assert result.allowed == False
        assert result.retry_after == 3000

    def test_status_does_not_count(self, limiter):
        assert limiter.status('1.2.3.4') is None

        limiter.check('1.2.3.4')
        status = limiter.status('1.2.3.4')

        assert status.count == 1
        assert limiter.status('1.2.3.4').count == 1

    def test_reset_clears_identifier(self, limiter):
        for _ in range(4):
            limiter.check('1.2.3.4')
        limiter.reset('1.2.3.4')

        assert limiter.check('1.2.3.4').allowed == True

    def test_cleanup_sweeps_expired_entries(self, clock):
        rolls = iter([1.0, 1.0, 0.0])
        limiter = FixedWindowRateLimiter(3, 60, clock=clock, rng=lambda: next(rolls))
        limiter.check('a')
        limiter.check('b')
        assert len(limiter) == 2

        clock.now += 61
        limiter.check('c')

        assert len(limiter) == 1

    def test_headers(self, limiter):
        for _ in range(4):
            result = limiter.check('1.2.3.4')
        headers = result.headers(include_retry_after=True)

        assert headers['X-RateLimit-Limit'] == '3'
        assert headers['X-RateLimit-Remaining'] == '0'
        assert headers['Retry-After'] == '3600'
        assert headers['X-RateLimit-Reset'].endswith('+00:00')
