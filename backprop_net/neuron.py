import numpy as np
from typing import List, Sequence

from .connection import Connection
from .exceptions import ContractViolation


def transfer(x: float) -> float:
    """Hyperbolic tangent, bounding output to (-1, 1)."""
    return float(np.tanh(x))


def transfer_derivative(y: float) -> float:
    """Derivative of tanh expressed in terms of its own output."""
    return 1.0 - y * y


class Neuron:
    """
    A tanh unit that owns its outgoing connections to the next layer.

    Connection k feeds the regular neuron with layer-local index k in the
    next layer, so a neuron reads its incoming weights from the previous
    layer with its own index as the key.

    Attributes:
        index: Position of this neuron within its layer
        is_bias: Bias units are pinned to an output of 1.0
        output_value: Latched input or computed activation
        gradient: Error gradient from the latest backward pass
        connections: Outgoing connections, one per regular neuron of the next layer
    """

    def __init__(self,
                 num_outputs: int,
                 index: int,
                 initializer=None,
                 is_bias: bool = False):
        """
        Initialize a neuron.

        Args:
            num_outputs: Number of regular neurons in the next layer (0 for the output layer)
            index: Position of this neuron within its layer
            initializer: Source of initial weights with a draw(count) method
            is_bias: Whether this neuron is its layer's bias unit
        """
        self.index = index
        self.is_bias = is_bias
        self.output_value = 1.0 if is_bias else 0.0
        self.gradient = 0.0

        if num_outputs > 0 and initializer is None:
            raise ContractViolation("An initializer is required for neurons with outgoing connections")
        weights = initializer.draw(num_outputs) if num_outputs > 0 else []
        self.connections: List[Connection] = [Connection(w) for w in weights]

    @classmethod
    def bias(cls, num_outputs: int, index: int, initializer=None) -> 'Neuron':
        """Create a bias unit."""
        return cls(num_outputs, index, initializer=initializer, is_bias=True)

    def latch(self, value: float):
        """
        Set the output directly (input layer only).

        Args:
            value: Input feature value
        """
        if self.is_bias:
            raise ContractViolation("Cannot latch a value into a bias unit")
        self.output_value = float(value)

    def evaluate(self, previous_layer: Sequence['Neuron']):
        """
        Compute this neuron's activation from the previous layer's outputs.

        The previous layer's bias unit contributes like any other neuron.

        Args:
            previous_layer: All neurons of the previous layer, bias included
        """
        total = 0.0
        for neuron in previous_layer:
            total += neuron.output_value * neuron.connections[self.index].weight
        self.output_value = transfer(total)

    def compute_output_gradient(self, target_value: float):
        """
        Gradient for an output-layer neuron.

        Args:
            target_value: Desired output for this neuron
        """
        delta = target_value - self.output_value
        self.gradient = delta * transfer_derivative(self.output_value)

    def sum_dow(self, next_layer: Sequence['Neuron']) -> float:
        """Sum of this neuron's contributions to the errors of the next layer."""
        total = 0.0
        for neuron in next_layer:
            if neuron.is_bias:
                continue
            total += self.connections[neuron.index].weight * neuron.gradient
        return total

    def compute_hidden_gradient(self, next_layer: Sequence['Neuron']):
        """
        Gradient for a hidden-layer neuron. The next layer's gradients must
        already be computed.

        Args:
            next_layer: All neurons of the next layer, bias included
        """
        self.gradient = self.sum_dow(next_layer) * transfer_derivative(self.output_value)

    def apply_weight_updates(self,
                             previous_layer: Sequence['Neuron'],
                             learning_rate: float,
                             momentum: float):
        """
        Update the weights feeding this neuron. These connections are owned by
        the previous layer's neurons and keyed by this neuron's index.

        Args:
            previous_layer: All neurons of the previous layer, bias included
            learning_rate: Step size (eta)
            momentum: Fraction of the previous update carried over (alpha)
        """
        for neuron in previous_layer:
            connection = neuron.connections[self.index]
            delta = (learning_rate * neuron.output_value * self.gradient
                     + momentum * connection.last_delta)
            connection.apply(delta)

    def outgoing_weights(self) -> np.ndarray:
        """Current outgoing weights in connection order."""
        return np.array([c.weight for c in self.connections], dtype=float)

    def __repr__(self):
        kind = "bias" if self.is_bias else "regular"
        return (f"Neuron({kind}, index={self.index}, output={self.output_value:.4f}, "
                f"connections={len(self.connections)})")
