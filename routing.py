from typing import Callable, List, Optional, Sequence

EXIT = None

class Router:
    """Picks the next queue for a client leaving service.

    Row ``i`` of the matrix holds the probabilities of moving from queue ``i``
    to each queue ``j``; whatever the row leaves short of 1 is the chance of
    leaving the network.
    """

    def __init__(self, matrix: Sequence[Sequence[float]]):
        self.matrix: List[List[float]] = [list(map(float, row)) for row in matrix]

    def exit_probability(self, source: int) -> float:
        return max(0.0, 1.0 - sum(self.matrix[source]))

    def has_destinations(self, source: int) -> bool:
        return any(p > 0.0 for p in self.matrix[source])

    def route(self, source: int, draw: Callable[[], float]) -> Optional[int]:
        p = draw()
        acc = 0.0
        for dst, prob in enumerate(self.matrix[source]):
            acc += prob
            if p < acc:
                return dst
        return EXIT
