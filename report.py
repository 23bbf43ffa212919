from typing import List, Sequence

from metrics import QueueMetrics, state_probabilities
from queue_node import QueueNode
from routing import Router
from simulator import ReplicationSummary, SimulationResult

WIDTH = 86
VISIBLE_STATE_TIME = 1e-6

def _capacity_label(q: QueueNode) -> str:
    return "Unbounded" if q.is_unbounded else str(int(q.capacity))

def _queue_header(lines: List[str], q: QueueNode, qid: int, router: Router, names: Sequence[str]):
    lines.append("=" * WIDTH)
    lines.append(f"QUEUE {q.name}")
    lines.append("-" * WIDTH)
    lines.append(f"Servers: {q.num_servers} | Capacity: {_capacity_label(q)}")
    if q.has_external_arrivals:
        lines.append(f"External arrivals: {q.min_arrival} .. {q.max_arrival}")
    else:
        lines.append("External arrivals: (none)")
    lines.append(f"Service: {q.min_service} .. {q.max_service}")
    if router.has_destinations(qid):
        lines.append("Routing:")
        for dst, p in enumerate(router.matrix[qid]):
            if p > 0:
                lines.append(f"  -> {names[dst]}: {p:.3f}")
        exit_p = router.exit_probability(qid)
        if exit_p > 0:
            lines.append(f"  -> EXIT: {exit_p:.3f}")
    else:
        lines.append("Routing: EXIT")
    lines.append("")

def _state_table(lines: List[str], time_in_state: Sequence[float], total: float):
    if total <= 0:
        lines.append("No accumulated time.")
        return
    lines.append("State   Acc. time           Probability")
    lines.append("-" * 50)
    for st, (t, p) in enumerate(zip(time_in_state, state_probabilities(time_in_state, total))):
        if t > VISIBLE_STATE_TIME:
            lines.append(f"{st:>4}     {t:>14.4f}      {p:>12.4%}")

def _metric_lines(lines: List[str], m: QueueMetrics, losses: int):
    lines.append("")
    lines.append(f"Mean population:   {m.mean_population:.4f}")
    lines.append(f"Throughput:        {m.throughput:.4f}")
    lines.append(f"Utilization:       {m.utilization:.4f}")
    lines.append(f"Response time:     {m.response_time:.4f}")
    lines.append(f"Loss probability:  {m.loss_probability:.4%}")
    lines.append(f"Losses: {losses}")
    lines.append("")

def format_report(result: SimulationResult) -> str:
    router = Router(result.config.routing)
    names = [q.name for q in result.queues]

    lines = []
    lines.append("=" * WIDTH)
    lines.append("QUEUEING NETWORK SIMULATOR")
    lines.append("=" * WIDTH)
    lines.append(f"Global simulation time: {result.global_time:.4f}")
    lines.append(f"Random numbers used: {result.draws_used} (limit {result.config.draw_budget})")
    lines.append(f"Routing draws: {result.routing_draws}")
    lines.append(f"Seed: {result.seed}")
    lines.append("")

    for qid, (q, m) in enumerate(zip(result.queues, result.metrics())):
        _queue_header(lines, q, qid, router, names)
        _state_table(lines, q.time_in_state, result.global_time)
        _metric_lines(lines, m, q.loss_count)

    lines.append("=" * WIDTH)
    return "\n".join(lines)

def format_replications(summary: ReplicationSummary) -> str:
    first = summary.results[0]
    router = Router(first.config.routing)
    names = [q.name for q in first.queues]
    total = summary.mean_global_time

    lines = []
    lines.append("=" * WIDTH)
    lines.append("QUEUEING NETWORK SIMULATOR")
    lines.append("=" * WIDTH)
    lines.append(f"Simulation average time: {total:.4f}")
    lines.append(f"Seeds: {', '.join(map(str, summary.seeds))}")
    lines.append(f"Random numbers per seed: {first.config.draw_budget}")
    lines.append("")

    for qid, m in enumerate(summary.mean_metrics()):
        _queue_header(lines, first.queues[qid], qid, router, names)
        _state_table(lines, summary.mean_time_in_state(qid), total)
        _metric_lines(lines, m, summary.total_losses(qid))

    lines.append("=" * WIDTH)
    return "\n".join(lines)
