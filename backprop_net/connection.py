class Connection:
    """
    A weighted link from a neuron to one regular neuron of the next layer.

    Attributes:
        weight: Current connection weight
        last_delta: Most recent update applied to the weight (momentum memory)
    """

    def __init__(self, weight: float, last_delta: float = 0.0):
        self.weight = float(weight)
        self.last_delta = float(last_delta)

    def apply(self, delta: float):
        """Add an update to the weight and remember it for momentum."""
        self.last_delta = delta
        self.weight += delta

    def __repr__(self):
        return f"Connection(weight={self.weight:.4f}, last_delta={self.last_delta:.4f})"
