"""Tests for the tick-driven countdown timer."""

from exam_app.core.services.countdown import CountdownTimer


class TestCountdownTimer:
    def test_not_running_until_started(self):
        timer = CountdownTimer(10)

        assert not timer.is_running()
        assert timer.tick() is False
        assert timer.remaining_seconds == 10

    def test_sixty_ticks_reach_zero_and_expire_once(self):
        expirations = []
        timer = CountdownTimer(60, on_expired=lambda: expirations.append(True))
        timer.start()

        results = [timer.tick() for _ in range(60)]

        assert results[:-1] == [False] * 59
        assert results[-1] is True
        assert timer.remaining_seconds == 0
        assert timer.has_expired()
        assert not timer.is_running()
        assert expirations == [True]

    def test_no_ticks_after_expiry(self):
        expirations = []
        timer = CountdownTimer(2, on_expired=lambda: expirations.append(True))
        timer.start()
        timer.tick()
        timer.tick()

        assert timer.tick() is False
        timer.start()
        assert not timer.is_running()
        assert timer.remaining_seconds == 0
        assert len(expirations) == 1

    def test_stop_freezes_remaining_time(self):
        timer = CountdownTimer(30)
        timer.start()
        timer.tick()
        timer.stop()

        timer.tick()

        assert timer.remaining_seconds == 29
        assert timer.elapsed_seconds == 1

    def test_reset_restores_full_duration(self):
        timer = CountdownTimer(5)
        timer.start()
        for _ in range(5):
            timer.tick()

        timer.reset(120)

        assert timer.remaining_seconds == 120
        assert timer.max_seconds == 120
        assert not timer.has_expired()
        assert not timer.is_running()
