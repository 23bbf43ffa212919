from enum import Enum
from typing import List, Optional

UNBOUNDED = float("inf")
DEFAULT_STATISTICS_BOUND = 999

class Admission(Enum):
    STARTED = "started"    # admitted straight into a free server
    WAITING = "waiting"    # admitted, all servers busy
    BLOCKED = "blocked"    # rejected, queue at capacity

class QueueNode:
    def __init__(
        self,
        name: str,
        servers: int,
        capacity: Optional[int],
        min_service: float,
        max_service: float,
        min_arrival: Optional[float] = None,
        max_arrival: Optional[float] = None,
        statistics_bound: int = DEFAULT_STATISTICS_BOUND,
    ):
        self.name = name
        self.num_servers = servers
        self.capacity = UNBOUNDED if not capacity else capacity
        self.min_arrival = min_arrival
        self.max_arrival = max_arrival
        self.min_service = min_service
        self.max_service = max_service

        self.in_service = 0
        self.waiting = 0

        self.arrivals = 0
        self.departure_count = 0
        self.loss_count = 0

        # States above the bound are folded into the last bucket.
        top = statistics_bound if self.is_unbounded else min(int(self.capacity), statistics_bound)
        self.time_in_state: List[float] = [0.0] * (top + 1)

    @property
    def n(self) -> int:
        return self.in_service + self.waiting

    @property
    def is_unbounded(self) -> bool:
        return self.capacity == UNBOUNDED

    @property
    def has_external_arrivals(self) -> bool:
        return self.min_arrival is not None and self.max_arrival is not None

    @property
    def mean_service(self) -> float:
        return (self.min_service + self.max_service) / 2.0

    def state_index(self) -> int:
        return min(self.n, len(self.time_in_state) - 1)

    def accumulate(self, delta: float):
        self.time_in_state[self.state_index()] += delta

    def try_admit(self) -> Admission:
        self.arrivals += 1
        if self.n >= self.capacity:
            self.loss_count += 1
            return Admission.BLOCKED
        if self.in_service < self.num_servers:
            self.in_service += 1
            return Admission.STARTED
        self.waiting += 1
        return Admission.WAITING

    def start_next_waiting(self) -> bool:
        if self.waiting > 0:
            self.waiting -= 1
            self.in_service += 1
            return True
        return False

    def complete_service(self):
        self.in_service -= 1
        self.departure_count += 1

    def __repr__(self):
        cap = "inf" if self.is_unbounded else int(self.capacity)
        return (f"QueueNode({self.name}, n={self.n}, busy={self.in_service}/{self.num_servers}, "
                f"cap={cap}, lost={self.loss_count})")
