from sitectl_client import poll_until


def test_poll_until_stops_on_first_match() -> None:
    calls: list[int] = []
    sleeps: list[float] = []

    def _check(attempt: int):
        calls.append(attempt)
        return "hit" if attempt == 3 else None

    result = poll_until(_check, attempts=30, interval_s=1, sleep=sleeps.append)

    assert result == "hit"
    assert calls == [1, 2, 3]
    assert sleeps == [1.0, 1.0]


def test_poll_until_exhausts_budget_without_trailing_sleep() -> None:
    sleeps: list[float] = []

    result = poll_until(lambda _: None, attempts=4, interval_s=0.5, sleep=sleeps.append)

    assert result is None
    assert sleeps == [0.5, 0.5, 0.5]


def test_poll_until_reports_attempts() -> None:
    seen = []
    poll_until(lambda n: n >= 2, attempts=5, interval_s=0, sleep=lambda _: None,
               on_attempt=lambda n, r: seen.append((n, r)))
    assert seen == [(1, False), (2, True)]
