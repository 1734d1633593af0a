from healthmate.utils.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_max_attempts():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_attempts=3, window_seconds=60, clock=clock)

    assert [limiter.check("u1") for _ in range(3)] == [True, True, True]
    assert limiter.check("u1") is False


def test_keys_are_independent():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_attempts=1, window_seconds=60, clock=clock)

    assert limiter.check("u1")
    assert limiter.check("u2")
    assert not limiter.check("u1")


def test_block_lasts_for_block_seconds():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_attempts=2, window_seconds=10, block_seconds=30, clock=clock)

    limiter.check("u1")
    limiter.check("u1")
    assert not limiter.check("u1")

    # window has passed but the block has not
    clock.now += 15
    assert not limiter.check("u1")
    assert limiter.remaining("u1") == 0

    clock.now += 20
    assert limiter.check("u1")
    assert limiter.remaining("u1") == 1


def test_old_attempts_slide_out_of_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_attempts=2, window_seconds=10, clock=clock)

    limiter.check("u1")
    clock.now += 6
    limiter.check("u1")
    clock.now += 5

    # first attempt is now 11s old
    assert limiter.remaining("u1") == 1
    assert limiter.check("u1")


def test_reset_clears_blocks():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_attempts=1, window_seconds=60, clock=clock)

    limiter.check("u1")
    assert not limiter.check("u1")

    limiter.reset()
    assert limiter.check("u1")
