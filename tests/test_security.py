from web.backend.security import FixedWindowRateLimiter


class Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_blocks():
    limiter = FixedWindowRateLimiter(max_requests=3, window_seconds=60, clock=Clock())
    decisions = [limiter.hit("1.2.3.4") for _ in range(4)]

    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]
    assert decisions[-1].reset_after == 60


def test_window_resets_after_expiry():
    clock = Clock()
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)

    assert limiter.hit("ip").allowed
    clock.now += 30
    blocked = limiter.hit("ip")
    assert not blocked.allowed
    assert blocked.reset_after == 30

    clock.now += 30
    assert limiter.hit("ip").allowed


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=Clock())
    assert limiter.hit("a").allowed
    assert limiter.hit("b").allowed
    assert not limiter.hit("a").allowed


def test_headers():
    limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=Clock())
    assert limiter.hit("x").headers() == {
        "RateLimit-Limit": "2",
        "RateLimit-Remaining": "1",
        "RateLimit-Reset": "60",
    }
