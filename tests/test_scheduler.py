from events import Event, EventKind
from scheduler import Scheduler

def test_pops_in_time_order():
    s = Scheduler()
    for t in (5.0, 1.0, 3.0, 2.0):
        s.add(Event(t, EventKind.ARRIVAL, 0))
    assert [s.next().time for _ in range(4)] == [1.0, 2.0, 3.0, 5.0]
    assert s.next() is None
    assert not s.has_events()

def test_departure_before_arrival_at_same_time():
    s = Scheduler()
    s.add(Event(4.0, EventKind.ARRIVAL, 0))
    s.add(Event(4.0, EventKind.DEPARTURE, 1))
    assert s.next().kind is EventKind.DEPARTURE
    assert s.next().kind is EventKind.ARRIVAL

def test_same_time_same_kind_is_fifo():
    s = Scheduler()
    for qid in (2, 0, 1):
        s.add(Event(1.5, EventKind.DEPARTURE, qid))
    assert [s.next().queue_id for _ in range(3)] == [2, 0, 1]

def test_len_and_clear():
    s = Scheduler()
    assert len(s) == 0
    s.add(Event(2.0, EventKind.ARRIVAL, 0))
    s.add(Event(1.0, EventKind.ARRIVAL, 0))
    assert len(s) == 2
    assert s.next().time == 1.0
    assert len(s) == 1
    s.clear()
    assert len(s) == 0
    assert s.next() is None

def test_schedulers_do_not_share_sequence():
    a, b = Scheduler(), Scheduler()
    a.add(Event(1.0, EventKind.ARRIVAL, 0))
    b.add(Event(1.0, EventKind.ARRIVAL, 1))
    b.add(Event(1.0, EventKind.ARRIVAL, 2))
    assert [b.next().queue_id, b.next().queue_id] == [1, 2]
