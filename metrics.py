from dataclasses import dataclass
from typing import List, Sequence

from queue_node import QueueNode

@dataclass(frozen=True)
class QueueMetrics:
    name: str
    mean_population: float
    throughput: float
    utilization: float
    response_time: float
    loss_probability: float
    loss_ratio: float

def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0

def state_probabilities(time_in_state: Sequence[float], total: float) -> List[float]:
    return [_ratio(t, total) for t in time_in_state]

def compute_metrics(q: QueueNode, global_time: float) -> QueueMetrics:
    """Derived figures for one queue; reads the queue, never mutates it.

    Loss probability is the share of time spent full, which differs from
    ``loss_ratio`` (rejected over attempted admissions).
    """
    weighted = sum(k * t for k, t in enumerate(q.time_in_state))
    mean_population = _ratio(weighted, global_time)
    throughput = _ratio(q.departure_count, global_time)
    utilization = min(1.0, _ratio(throughput * q.mean_service, q.num_servers))
    response_time = _ratio(mean_population, throughput)

    loss_probability = 0.0
    if not q.is_unbounded and int(q.capacity) < len(q.time_in_state):
        loss_probability = _ratio(q.time_in_state[int(q.capacity)], global_time)

    return QueueMetrics(
        name=q.name,
        mean_population=mean_population,
        throughput=throughput,
        utilization=utilization,
        response_time=response_time,
        loss_probability=loss_probability,
        loss_ratio=_ratio(q.loss_count, q.arrivals),
    )

def mean_metrics(samples: Sequence[QueueMetrics]) -> QueueMetrics:
    count = len(samples)
    return QueueMetrics(
        name=samples[0].name,
        mean_population=sum(m.mean_population for m in samples) / count,
        throughput=sum(m.throughput for m in samples) / count,
        utilization=sum(m.utilization for m in samples) / count,
        response_time=sum(m.response_time for m in samples) / count,
        loss_probability=sum(m.loss_probability for m in samples) / count,
        loss_ratio=sum(m.loss_ratio for m in samples) / count,
    )

def mean_time_in_state(queues: Sequence[QueueNode]) -> List[float]:
    width = max(len(q.time_in_state) for q in queues)
    totals = [0.0] * width
    for q in queues:
        for k, t in enumerate(q.time_in_state):
            totals[k] += t
    return [t / len(queues) for t in totals]
