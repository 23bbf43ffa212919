MODULUS = 1 << 48
MULTIPLIER = 25214903917
INCREMENT = 11

DEFAULT_SEED = 12345

class UniformGenerator:
    """Linear congruential generator over 48 bits, returning bits 47..16.

    The whole sequence is a function of the initial seed, so two generators
    built from the same seed draw identical values.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self.initial_seed = seed
        self.seed = seed & (MODULUS - 1)
        self.draws = 0

    def next(self) -> float:
        self.seed = (MULTIPLIER * self.seed + INCREMENT) & (MODULUS - 1)
        self.draws += 1
        return (self.seed >> 16) / float(1 << 32)

    def uniform(self, low: float, high: float) -> float:
        return low + self.next() * (high - low)

    def __repr__(self):
        return f"UniformGenerator(seed={self.initial_seed}, draws={self.draws})"
