import pytest

from smallproxy.loop_guard import TIMEOUT_SECS, LoopRecords


class FakeClock:
    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


def test_added_address_loops():
    records = LoopRecords(clock=FakeClock())
    records.add(("127.0.0.1", 8888))
    assert records.loops(("127.0.0.1", 8888)) is True
    assert len(records) == 1


def test_different_port_does_not_loop():
    records = LoopRecords(clock=FakeClock())
    records.add(("127.0.0.1", 8888))
    assert records.loops(("127.0.0.1", 8889)) is False


def test_different_host_does_not_loop():
    records = LoopRecords(clock=FakeClock())
    records.add(("127.0.0.1", 8888))
    assert records.loops(("127.0.0.2", 8888)) is False


def test_families_are_distinct():
    records = LoopRecords(clock=FakeClock())
    records.add(("127.0.0.1", 8888))
    assert records.loops(("::ffff:127.0.0.1", 8888, 0, 0)) is False


def test_ipv6_four_tuple():
    records = LoopRecords(clock=FakeClock())
    records.add(("::1", 3128, 0, 0))
    assert records.loops(("::1", 3128, 0, 0)) is True
    assert records.loops(("0:0:0:0:0:0:0:1", 3128)) is True


def test_record_kept_until_timeout_passes():
    clock = FakeClock()
    records = LoopRecords(clock=clock)
    records.add(("10.0.0.1", 80))
    clock.now += TIMEOUT_SECS
    assert records.loops(("10.0.0.1", 80)) is True
    clock.now += 1
    assert records.loops(("10.0.0.1", 80)) is False
    assert len(records) == 0


def test_expired_records_purged_even_on_match():
    clock = FakeClock()
    records = LoopRecords(clock=clock)
    records.add(("10.0.0.1", 80))
    clock.now += TIMEOUT_SECS + 1
    records.add(("10.0.0.2", 80))
    assert records.loops(("10.0.0.2", 80)) is True
    assert len(records) == 1


def test_custom_timeout():
    clock = FakeClock()
    records = LoopRecords(timeout=2, clock=clock)
    records.add(("10.0.0.1", 80))
    clock.now += 3
    assert records.loops(("10.0.0.1", 80)) is False


def test_invalid_address_rejected():
    records = LoopRecords(clock=FakeClock())
    with pytest.raises(ValueError):
        records.add(("not-an-ip", 80))