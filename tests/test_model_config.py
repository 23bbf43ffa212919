import pytest

from model_config import ConfigError, QueueConfig, SimulationConfig, load_config, parse_config

MODEL = """\
# header ignored by the loader
!PARAMETERS

arrivals:
   Q1: 2.0

queues:
   Q1:
      servers: 1
      minArrival: 2.0
      maxArrival: 4.0
      minService: 1.0
      maxService: 2.0
   Q2:
      servers: 2
      capacity: 5
      minService: 4.0
      maxService: 6.0

network:
-  source: Q1
   target: Q2
   probability: 0.8
-  source: Q2
   target: Q1
   probability: 0.3

rndnumbersPerSeed: 2000
seeds:
- 1
- 2
"""

def queue(**overrides):
    params = dict(name="Q1", servers=1, capacity=0, service_min=1.0, service_max=2.0,
                  arrival_min=1.0, arrival_max=2.0)
    params.update(overrides)
    return QueueConfig(**params)

def build(queues=None, routing=None, first_arrivals=None, **kwargs):
    return SimulationConfig(
        queues=queues if queues is not None else [queue()],
        routing=routing if routing is not None else [[0.0]],
        first_arrivals=first_arrivals if first_arrivals is not None else {0: 1.0},
        **kwargs,
    )

def test_from_parameters_reference_network(network_config):
    assert [q.name for q in network_config.queues] == ["Q1", "Q2", "Q3"]
    assert network_config.queues[0].has_external_arrivals
    assert not network_config.queues[1].has_external_arrivals
    assert network_config.queues[1].capacity == 5
    assert network_config.first_arrivals == {0: 2.0}
    assert network_config.seed == 12345

def test_default_seed_when_none_given():
    assert build().seed == 12345

@pytest.mark.parametrize("overrides, message", [
    (dict(capacity=-1), "capacity"),
    (dict(servers=0), "server"),
    (dict(service_min=3.0, service_max=2.0), "service bounds"),
    (dict(arrival_min=3.0, arrival_max=2.0), "arrival bounds reversed"),
    (dict(arrival_max=None), "together"),
])
def test_invalid_queue(overrides, message):
    with pytest.raises(ConfigError, match=message):
        build(queues=[queue(**overrides)])

@pytest.mark.parametrize("routing", [
    [[0.0, 0.0]],
    [[0.0], [0.0]],
    [[-0.1]],
    [[1.2]],
])
def test_invalid_routing(routing):
    with pytest.raises(ConfigError):
        build(routing=routing)

def test_row_sum_of_exactly_one_is_accepted():
    qs = [queue(), queue(name="Q2", arrival_min=None, arrival_max=None)]
    build(queues=qs, routing=[[0.0, 1.0], [0.7, 0.3]])

@pytest.mark.parametrize("kwargs", [
    dict(queues=[]),
    dict(first_arrivals={}),
    dict(first_arrivals={3: 1.0}),
    dict(first_arrivals={0: -1.0}),
    dict(draw_budget=0),
    dict(statistics_bound=0),
])
def test_invalid_simulation(kwargs):
    with pytest.raises(ConfigError):
        build(**kwargs)

def test_first_arrival_needs_arrival_bounds():
    with pytest.raises(ConfigError, match="no arrival bounds"):
        build(queues=[queue(arrival_min=None, arrival_max=None)])

def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)

def test_load_config(tmp_path):
    path = tmp_path / "model.yml"
    path.write_text(MODEL, encoding="utf-8")
    config = load_config(str(path))
    assert [q.name for q in config.queues] == ["Q1", "Q2"]
    assert config.queues[0].capacity == 0
    assert config.queues[1].capacity == 5
    assert config.queues[1].arrival_min is None
    assert config.routing == [[0.0, 0.8], [0.3, 0.0]]
    assert config.first_arrivals == {0: 2.0}
    assert config.draw_budget == 2000
    assert config.seeds == (1, 2)

def test_parse_config_drawn_first_arrival_and_bound():
    cfg = {
        "arrivals": {"A": None},
        "queues": {"A": {"servers": 1, "minArrival": 1, "maxArrival": 2,
                         "minService": 1, "maxService": 2}},
        "seeds": 9,
        "statisticsBound": 50,
    }
    config = parse_config(cfg)
    assert config.first_arrivals == {0: None}
    assert config.seeds == (9,)
    assert config.statistics_bound == 50
    assert config.routing == [[0.0]]

@pytest.mark.parametrize("cfg", [
    {"arrivals": {"X": 1.0},
     "queues": {"A": {"servers": 1, "minArrival": 1, "maxArrival": 2, "minService": 1, "maxService": 2}}},
    {"arrivals": {"A": 1.0},
     "queues": {"A": {"servers": 1, "minArrival": 1, "maxArrival": 2, "minService": 1, "maxService": 2}},
     "network": [{"source": "A", "target": "B", "probability": 0.5}]},
    {"arrivals": {"A": 1.0}, "queues": {"A": {"servers": 1, "minService": 1}}},
])
def test_parse_config_rejects_bad_models(cfg):
    with pytest.raises(ConfigError):
        parse_config(cfg)

GOOD_QUEUE = {"servers": 1, "minArrival": 1, "maxArrival": 2, "minService": 1, "maxService": 2}

@pytest.mark.parametrize("cfg, message", [
    ({"arrivals": {"A": 1.0}, "queues": {"A": GOOD_QUEUE},
      "network": [{"source": "A", "target": "A"}]}, "network link 0: missing key 'probability'"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": GOOD_QUEUE},
      "network": [{"source": "A", "target": "A", "probability": "half"}]}, "network link 0"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": GOOD_QUEUE}, "network": {"source": "A"}}, "network"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": dict(GOOD_QUEUE, servers="one")}}, "queue A"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": None}}, "parameters missing"),
    ({"arrivals": {"A": 1.0}, "queues": ["A"]}, "mapping"),
    ({"arrivals": {"A": "soon"}, "queues": {"A": GOOD_QUEUE}}, "arrival for queue A"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": GOOD_QUEUE}, "rndnumbersPerSeed": "many"}, "simulation parameters"),
    ({"arrivals": {"A": 1.0}, "queues": {"A": GOOD_QUEUE}, "seeds": ["x"]}, "simulation parameters"),
    ("not a model", "mapping"),
])
def test_parse_config_wraps_malformed_values(cfg, message):
    with pytest.raises(ConfigError, match=message):
        parse_config(cfg)

def test_capacity_above_statistics_bound_is_rejected():
    with pytest.raises(ConfigError, match="statistics bound"):
        build(queues=[queue(capacity=10)], statistics_bound=5)

def test_capacity_equal_to_statistics_bound_is_accepted():
    config = build(queues=[queue(capacity=5)], statistics_bound=5)
    assert config.queues[0].capacity == 5
