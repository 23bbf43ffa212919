import pytest

from model_config import SimulationConfig

NETWORK_QUEUES = [
    (0, 1, 1.0, 2.0),
    (5, 2, 4.0, 6.0),
    (10, 2, 5.0, 15.0),
]

NETWORK_ROUTING = [
    [0.0, 0.8, 0.2],
    [0.3, 0.0, 0.5],
    [0.0, 0.7, 0.0],
]

@pytest.fixture
def network_config():
    return SimulationConfig.from_parameters(
        arrival_min=2.0,
        arrival_max=4.0,
        queue_params=NETWORK_QUEUES,
        routing=NETWORK_ROUTING,
        first_arrival=2.0,
        draw_budget=5000,
        seed=12345,
    )

@pytest.fixture
def single_queue():
    def make(capacity, servers, arrivals, service, budget, seed=7, first_arrival=2.0):
        return SimulationConfig.from_parameters(
            arrival_min=arrivals[0],
            arrival_max=arrivals[1],
            queue_params=[(capacity, servers, service[0], service[1])],
            routing=[[0.0]],
            first_arrival=first_arrival,
            draw_budget=budget,
            seed=seed,
        )
    return make
