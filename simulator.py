import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from events import Event, EventKind
from metrics import QueueMetrics, compute_metrics, mean_metrics, mean_time_in_state
from model_config import ConfigError, SimulationConfig
from queue_node import Admission, QueueNode
from routing import EXIT, Router
from scheduler import Scheduler
from variates import UniformGenerator

log = logging.getLogger(__name__)

STOP_BUDGET = "budget"
STOP_EMPTY = "empty"

@dataclass
class EngineState:
    global_time: float = 0.0
    last_event_time: float = 0.0
    draws_used: int = 0
    routing_draws: int = 0
    events_processed: int = 0
    external_arrivals: int = 0
    departures_processed: int = 0
    stop_reason: Optional[str] = None

@dataclass
class SimulationResult:
    seed: int
    state: EngineState
    queues: List[QueueNode]
    config: SimulationConfig

    @property
    def global_time(self) -> float:
        return self.state.global_time

    @property
    def draws_used(self) -> int:
        return self.state.draws_used

    @property
    def routing_draws(self) -> int:
        return self.state.routing_draws

    def metrics(self) -> List[QueueMetrics]:
        return [compute_metrics(q, self.state.global_time) for q in self.queues]

class Simulator:
    """Event-driven simulation of one queueing network run.

    Every call to :meth:`run` rebuilds queues, schedule and generator from the
    configuration, so repeated runs of one instance give identical results.
    Only timing draws (inter-arrival and service times) count against the
    draw budget; routing draws use the same stream but are tallied apart.
    """

    def __init__(self, config: SimulationConfig, seed: Optional[int] = None, record_trace: bool = False):
        self.config = config
        self.seed = config.seed if seed is None else seed
        self.record_trace = record_trace

        self.queues: List[QueueNode] = []
        self.router = Router(config.routing)
        self.scheduler = Scheduler()
        self.generator = UniformGenerator(self.seed)
        self.state = EngineState()
        self.trace: List[Event] = []

    def reset(self):
        self.queues = [
            QueueNode(
                name=qc.name,
                servers=qc.servers,
                capacity=qc.capacity,
                min_service=qc.service_min,
                max_service=qc.service_max,
                min_arrival=qc.arrival_min,
                max_arrival=qc.arrival_max,
                statistics_bound=self.config.statistics_bound,
            )
            for qc in self.config.queues
        ]
        self.router = Router(self.config.routing)
        self.scheduler = Scheduler()
        self.generator = UniformGenerator(self.seed)
        self.state = EngineState()
        self.trace = []

        for qid in sorted(self.config.first_arrivals):
            t = self.config.first_arrivals[qid]
            if t is None:
                t = self.draw_interarrival(self.queues[qid])
                if t is None:
                    continue
            self._push(Event(float(t), EventKind.ARRIVAL, qid))

    # -- random draws -------------------------------------------------------

    def budget_exhausted(self) -> bool:
        return self.state.draws_used >= self.config.draw_budget

    def draw_uniform(self, low: float, high: float) -> Optional[float]:
        if self.budget_exhausted():
            return None
        self.state.draws_used += 1
        return self.generator.uniform(low, high)

    def draw_interarrival(self, q: QueueNode) -> Optional[float]:
        return self.draw_uniform(q.min_arrival, q.max_arrival)

    def draw_service(self, q: QueueNode) -> Optional[float]:
        return self.draw_uniform(q.min_service, q.max_service)

    def draw_routing(self) -> float:
        self.state.routing_draws += 1
        return self.generator.next()

    # -- bookkeeping --------------------------------------------------------

    def accrue_time(self, t: float):
        delta = t - self.state.last_event_time
        for q in self.queues:
            q.accumulate(delta)
        self.state.last_event_time = t
        self.state.global_time = t

    def _push(self, ev: Event):
        self.scheduler.add(ev)

    def _start_service(self, qid: int):
        s = self.draw_service(self.queues[qid])
        if s is not None:
            self._push(Event(self.state.global_time + s, EventKind.DEPARTURE, qid))

    def _admit(self, qid: int) -> Admission:
        outcome = self.queues[qid].try_admit()
        if outcome is Admission.STARTED:
            self._start_service(qid)
        return outcome

    # -- transitions --------------------------------------------------------

    def handle_arrival(self, ev: Event):
        q = self.queues[ev.queue_id]
        self.state.external_arrivals += 1

        gap = self.draw_interarrival(q)
        if gap is not None:
            self._push(Event(self.state.global_time + gap, EventKind.ARRIVAL, ev.queue_id))

        self._admit(ev.queue_id)

    def handle_departure(self, ev: Event):
        q = self.queues[ev.queue_id]
        q.complete_service()
        self.state.departures_processed += 1

        dst = self.router.route(ev.queue_id, self.draw_routing)
        if dst is not EXIT:
            self._admit(dst)

        if q.start_next_waiting():
            self._start_service(ev.queue_id)

    def _dispatch(self, ev: Event):
        if ev.kind is EventKind.ARRIVAL:
            self.handle_arrival(ev)
        elif ev.kind is EventKind.DEPARTURE:
            self.handle_departure(ev)
        else:
            raise ValueError(f"unknown event kind {ev.kind!r}")

    # -- main loop ----------------------------------------------------------

    def step(self) -> Optional[Event]:
        """Process the earliest pending event; None once the run has stopped."""
        if self.state.stop_reason is not None:
            return None
        if not self.scheduler.has_events():
            self.state.stop_reason = STOP_EMPTY
            return None
        if self.budget_exhausted():
            self.state.stop_reason = STOP_BUDGET
            return None

        ev = self.scheduler.next()
        self.accrue_time(ev.time)
        log.debug("t=%.4f %s at %s", ev.time, ev.kind.value, self.queues[ev.queue_id].name)
        self._dispatch(ev)
        self.state.events_processed += 1
        if self.record_trace:
            self.trace.append(ev)
        return ev

    def finish(self) -> SimulationResult:
        self.accrue_time(self.state.global_time)
        log.info("Run stopped (%s) at t=%.4f after %d events, %d random numbers used, %d events pending",
                 self.state.stop_reason, self.state.global_time,
                 self.state.events_processed, self.state.draws_used, len(self.scheduler))
        return SimulationResult(seed=self.seed, state=self.state, queues=self.queues, config=self.config)

    def run(self) -> SimulationResult:
        self.reset()
        log.info("Running %d queues with seed %d, budget %d",
                 len(self.queues), self.seed, self.config.draw_budget)
        while self.step() is not None:
            pass
        return self.finish()

@dataclass
class ReplicationSummary:
    results: List[SimulationResult] = field(default_factory=list)

    @property
    def seeds(self) -> List[int]:
        return [r.seed for r in self.results]

    @property
    def mean_global_time(self) -> float:
        return sum(r.global_time for r in self.results) / len(self.results)

    def mean_time_in_state(self, qid: int) -> List[float]:
        return mean_time_in_state([r.queues[qid] for r in self.results])

    def total_losses(self, qid: int) -> int:
        return sum(r.queues[qid].loss_count for r in self.results)

    def mean_metrics(self) -> List[QueueMetrics]:
        per_run = [r.metrics() for r in self.results]
        return [mean_metrics([m[qid] for m in per_run]) for qid in range(len(per_run[0]))]

def run_replications(config: SimulationConfig, seeds: Optional[Iterable[int]] = None) -> ReplicationSummary:
    seeds = list(seeds) if seeds is not None else list(config.seeds or (config.seed,))
    if not seeds:
        raise ConfigError("at least one seed is required")
    summary = ReplicationSummary()
    for sd in seeds:
        log.info("Replication with seed %d", sd)
        summary.results.append(Simulator(config, seed=sd).run())
    return summary
