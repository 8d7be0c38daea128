from narrative.core.timer import Countdown, Ticker


def test_countdown_runs_out():
    cooldown = Countdown()
    assert not cooldown.active

    cooldown.start(0.5)
    assert cooldown.active

    cooldown.tick(0.25)
    assert cooldown.active
    assert cooldown.remaining == 0.25

    cooldown.tick(0.5)
    assert not cooldown.active
    assert cooldown.remaining == 0.0


def test_countdown_cancel():
    cooldown = Countdown()
    cooldown.start(1.0)
    cooldown.cancel()
    assert not cooldown.active


def test_countdown_negative_duration_is_inactive():
    cooldown = Countdown()
    cooldown.start(-1)
    assert not cooldown.active


def test_ticker_counts_whole_intervals():
    ticker = Ticker(0.25)
    assert ticker.tick(0.125) == 0
    assert ticker.tick(0.125) == 1
    assert ticker.tick(0.75) == 3


def test_ticker_reset_drops_remainder():
    ticker = Ticker(0.5)
    ticker.tick(0.25)
    ticker.reset()
    assert ticker.tick(0.25) == 0


def test_ticker_zero_interval_bursts():
    ticker = Ticker(0, burst=100)
    assert ticker.tick(0.0) == 100
