from dataclasses import dataclass
from enum import Enum

class EventKind(Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"

# Among events sharing a timestamp, departures are served first.
KIND_PRIORITY = {
    EventKind.DEPARTURE: 0,
    EventKind.ARRIVAL: 1,
}

@dataclass(frozen=True)
class Event:
    time: float
    kind: EventKind
    queue_id: int

    def __repr__(self):
        return f"Event({self.kind.value}, t={self.time:.4f}, q={self.queue_id})"
