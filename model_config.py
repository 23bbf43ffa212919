import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from queue_node import DEFAULT_STATISTICS_BOUND
from variates import DEFAULT_SEED

log = logging.getLogger(__name__)

PARAMETERS_TAG = "!PARAMETERS"
ROW_SUM_TOLERANCE = 1e-9

class ConfigError(ValueError):
    pass

@dataclass
class QueueConfig:
    name: str
    servers: int
    capacity: int
    service_min: float
    service_max: float
    arrival_min: Optional[float] = None
    arrival_max: Optional[float] = None

    @property
    def has_external_arrivals(self) -> bool:
        return self.arrival_min is not None and self.arrival_max is not None

    def validate(self):
        if self.capacity < 0:
            raise ConfigError(f"queue {self.name}: capacity must be >= 0 (0 = unbounded), got {self.capacity}")
        if self.servers < 1:
            raise ConfigError(f"queue {self.name}: needs at least one server, got {self.servers}")
        if self.service_min > self.service_max:
            raise ConfigError(
                f"queue {self.name}: service bounds reversed ({self.service_min} > {self.service_max})")
        if (self.arrival_min is None) != (self.arrival_max is None):
            raise ConfigError(f"queue {self.name}: arrival bounds must be given together")
        if self.has_external_arrivals and self.arrival_min > self.arrival_max:
            raise ConfigError(
                f"queue {self.name}: arrival bounds reversed ({self.arrival_min} > {self.arrival_max})")

@dataclass
class SimulationConfig:
    """Static description of one experiment.

    ``first_arrivals`` maps a queue index to the time of its first external
    arrival; ``None`` means the time is drawn from the queue's arrival bounds.
    """
    queues: List[QueueConfig]
    routing: List[List[float]]
    first_arrivals: Dict[int, Optional[float]]
    draw_budget: int = 100000
    seeds: Tuple[int, ...] = field(default_factory=tuple)
    statistics_bound: int = DEFAULT_STATISTICS_BOUND

    def __post_init__(self):
        self.routing = [[float(p) for p in row] for row in self.routing]
        self.seeds = tuple(int(s) for s in self.seeds)
        self.validate()

    @property
    def seed(self) -> int:
        return self.seeds[0] if self.seeds else DEFAULT_SEED

    def validate(self):
        if not self.queues:
            raise ConfigError("at least one queue is required")
        for q in self.queues:
            q.validate()

        size = len(self.queues)
        if len(self.routing) != size:
            raise ConfigError(f"routing matrix has {len(self.routing)} rows for {size} queues")
        for i, row in enumerate(self.routing):
            if len(row) != size:
                raise ConfigError(f"routing row {i} has {len(row)} entries, expected {size}")
            if any(p < 0 for p in row):
                raise ConfigError(f"routing row {i} has a negative probability")
            if sum(row) > 1.0 + ROW_SUM_TOLERANCE:
                raise ConfigError(f"routing row {i} sums to {sum(row):.6f} > 1")

        if not self.first_arrivals:
            raise ConfigError("no queue receives external arrivals")
        for qid, t in self.first_arrivals.items():
            if not 0 <= qid < size:
                raise ConfigError(f"first arrival given for unknown queue index {qid}")
            q = self.queues[qid]
            if not q.has_external_arrivals:
                raise ConfigError(f"queue {q.name} has a first arrival but no arrival bounds")
            if t is not None and t < 0:
                raise ConfigError(f"queue {q.name}: first arrival time must be >= 0, got {t}")

        if self.draw_budget < 1:
            raise ConfigError(f"draw budget must be positive, got {self.draw_budget}")
        if self.statistics_bound < 1:
            raise ConfigError(f"statistics bound must be positive, got {self.statistics_bound}")
        for q in self.queues:
            if q.capacity > self.statistics_bound:
                raise ConfigError(
                    f"queue {q.name}: capacity {q.capacity} exceeds the statistics bound "
                    f"{self.statistics_bound}; raise statisticsBound to track every state")

    @classmethod
    def from_parameters(
        cls,
        arrival_min: float,
        arrival_max: float,
        queue_params: Sequence[Sequence[float]],
        routing: Sequence[Sequence[float]],
        first_arrival: Optional[float],
        draw_budget: int,
        seed: Optional[int] = None,
        statistics_bound: int = DEFAULT_STATISTICS_BOUND,
    ) -> "SimulationConfig":
        """Single-entry network: external clients always join queue 0.

        ``queue_params`` holds one ``(capacity, servers, service_min,
        service_max)`` tuple per queue.
        """
        queues = []
        for i, (capacity, servers, smin, smax) in enumerate(queue_params):
            queues.append(QueueConfig(
                name=f"Q{i + 1}",
                servers=int(servers),
                capacity=int(capacity),
                service_min=float(smin),
                service_max=float(smax),
                arrival_min=float(arrival_min) if i == 0 else None,
                arrival_max=float(arrival_max) if i == 0 else None,
            ))
        return cls(
            queues=queues,
            routing=[list(row) for row in routing],
            first_arrivals={0: first_arrival},
            draw_budget=int(draw_budget),
            seeds=(seed,) if seed is not None else (),
            statistics_bound=statistics_bound,
        )

def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)

def _mapping(cfg: dict, key: str) -> dict:
    value = cfg.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key!r} must be a mapping of queue names")
    return value

def parse_config(cfg: dict) -> SimulationConfig:
    if not isinstance(cfg, dict):
        raise ConfigError("model must be a mapping with 'queues', 'arrivals' and 'network' keys")
    queue_items = list(_mapping(cfg, "queues").items())
    index = {name: i for i, (name, _) in enumerate(queue_items)}

    queues = []
    for name, p in queue_items:
        if not isinstance(p, dict):
            raise ConfigError(f"queue {name}: parameters missing")
        try:
            queues.append(QueueConfig(
                name=str(name),
                servers=int(p["servers"]),
                capacity=int(p.get("capacity") or 0),
                service_min=float(p["minService"]),
                service_max=float(p["maxService"]),
                arrival_min=_optional_float(p.get("minArrival")),
                arrival_max=_optional_float(p.get("maxArrival")),
            ))
        except KeyError as e:
            raise ConfigError(f"queue {name}: missing key {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ConfigError(f"queue {name}: {e}") from e

    size = len(queues)
    routing = [[0.0] * size for _ in range(size)]
    links = cfg.get("network") or []
    if not isinstance(links, list):
        raise ConfigError("'network' must be a list of links")
    for i, link in enumerate(links):
        try:
            src, dst = link["source"], link["target"]
            prob = float(link["probability"])
        except KeyError as e:
            raise ConfigError(f"network link {i}: missing key {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ConfigError(f"network link {i}: {e}") from e
        for end in (src, dst):
            if end not in index:
                raise ConfigError(f"network link refers to unknown queue {end!r}")
        routing[index[src]][index[dst]] += prob

    first_arrivals = {}
    for name, t in _mapping(cfg, "arrivals").items():
        if name not in index:
            raise ConfigError(f"arrival given for unknown queue {name!r}")
        try:
            first_arrivals[index[name]] = _optional_float(t)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"arrival for queue {name}: {e}") from e

    kwargs = {}
    try:
        if "rndnumbersPerSeed" in cfg:
            kwargs["draw_budget"] = int(cfg["rndnumbersPerSeed"])
        if "statisticsBound" in cfg:
            kwargs["statistics_bound"] = int(cfg["statisticsBound"])
        seeds = cfg.get("seeds") or ()
        if isinstance(seeds, int):
            seeds = (seeds,)
        seeds = tuple(int(s) for s in seeds)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"simulation parameters: {e}") from e

    return SimulationConfig(
        queues=queues,
        routing=routing,
        first_arrivals=first_arrivals,
        seeds=seeds,
        **kwargs,
    )

def load_config(path: str) -> SimulationConfig:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    i = text.find(PARAMETERS_TAG)
    if i != -1:
        text = text[i + len(PARAMETERS_TAG):]
    cfg = yaml.safe_load(text) or {}
    config = parse_config(cfg)
    log.info("Loaded model %s: %d queues, %d random numbers per seed",
             path, len(config.queues), config.draw_budget)
    return config
