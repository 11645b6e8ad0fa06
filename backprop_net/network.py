import numbers

import numpy as np
from typing import Dict, List, Optional, Sequence

from .exceptions import ContractViolation
from .layer import Layer
from .weight_init import WeightInitializer

DEFAULT_LEARNING_RATE = 0.15
DEFAULT_MOMENTUM = 0.5
DEFAULT_AVERAGING_FACTOR = 100.0


def validate_topology(topology: Sequence[int]) -> tuple:
    """
    Check that a topology is a sequence of at least two positive integers.

    Args:
        topology: Neuron counts per layer, bias units excluded

    Returns:
        The topology as a tuple of ints
    """
    try:
        values = list(topology)
    except TypeError:
        raise ContractViolation(f"Topology must be a sequence, got {topology!r}")

    if len(values) < 2:
        raise ContractViolation(f"Topology needs at least an input and an output layer, got {values}")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
            raise ContractViolation(f"Layer sizes must be positive integers, got {values}")
    return tuple(int(v) for v in values)


def _as_setting(value, name: str) -> float:
    """A finite real-valued configuration setting as a float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ContractViolation(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not np.isfinite(value):
        raise ContractViolation(f"{name} must be finite, got {value}")
    return value


def _as_vector(values, expected: int, name: str) -> np.ndarray:
    try:
        vector = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        raise ContractViolation(f"{name} must be numeric, got {values!r}")
    if vector.ndim != 1 or vector.shape[0] != expected:
        raise ContractViolation(
            f"Expected {expected} {name}, got shape {vector.shape}"
        )
    return vector


class Network:
    """
    Fully-connected feedforward network trained one example at a time by
    backpropagation with momentum.

    Features:
    - tanh activations with a bias unit in every layer
    - RMS error with an exponentially smoothed running average
    - per-connection momentum memory
    """

    def __init__(self,
                 topology: Sequence[int],
                 learning_rate: float = DEFAULT_LEARNING_RATE,
                 momentum: float = DEFAULT_MOMENTUM,
                 averaging_factor: float = DEFAULT_AVERAGING_FACTOR,
                 initializer=None,
                 seed: Optional[int] = None):
        """
        Initialize the network.

        Args:
            topology: Neuron counts per layer, input first, bias units excluded
            learning_rate: Step size of each weight update (eta)
            momentum: Fraction of the previous update carried into the next (alpha)
            averaging_factor: Smoothing window of the running average error
            initializer: Weight source with a draw(count) method (seeded WeightInitializer if None)
            seed: Seed for the default initializer
        """
        self.topology = validate_topology(topology)

        self.learning_rate = _as_setting(learning_rate, "learning_rate")
        self.momentum = _as_setting(momentum, "momentum")
        self.averaging_factor = _as_setting(averaging_factor, "averaging_factor")

        if not self.learning_rate >= 0:
            raise ContractViolation(f"learning_rate must be >= 0, got {learning_rate}")
        if not self.momentum >= 0:
            raise ContractViolation(f"momentum must be >= 0, got {momentum}")
        if not self.averaging_factor > 0:
            raise ContractViolation(f"averaging_factor must be > 0, got {averaging_factor}")

        if initializer is None:
            initializer = WeightInitializer(seed)

        # Network structure
        self.layers: List[Layer] = []
        self._initialize_layers(initializer)

        # Training state
        self.current_error = 0.0
        self.running_average_error = 0.0
        self.training_passes = 0

    def _initialize_layers(self, initializer):
        """Build one layer per topology entry, wired to the next layer."""
        last = len(self.topology) - 1
        for i, size in enumerate(self.topology):
            num_outputs = 0 if i == last else self.topology[i + 1]
            self.layers.append(Layer(size, num_outputs, initializer=initializer))

    @property
    def input_layer(self) -> Layer:
        return self.layers[0]

    @property
    def output_layer(self) -> Layer:
        return self.layers[-1]

    def feed_forward(self, inputs: Sequence[float]):
        """
        Forward pass: latch the inputs and evaluate every later layer in order.

        Args:
            inputs: One value per input neuron
        """
        inputs = _as_vector(inputs, self.topology[0], "inputs")

        for neuron, value in zip(self.input_layer.regular, inputs):
            neuron.latch(value)

        for layer_num in range(1, len(self.layers)):
            previous_layer = self.layers[layer_num - 1]
            for neuron in self.layers[layer_num].regular:
                neuron.evaluate(previous_layer)

    def get_results(self) -> np.ndarray:
        """Output layer values in index order, bias excluded."""
        return self.output_layer.outputs()

    def predict(self, inputs: Sequence[float]) -> np.ndarray:
        """Feed forward and return the results."""
        self.feed_forward(inputs)
        return self.get_results()

    def back_prop(self, targets: Sequence[float]):
        """
        Backward pass: measure the error, compute every gradient, then update
        every weight.

        Args:
            targets: One desired value per output neuron
        """
        targets = _as_vector(targets, self.topology[-1], "targets")
        output_layer = self.output_layer

        # Overall net error (RMS of output neuron errors)
        deltas = targets - output_layer.outputs()
        self.current_error = float(np.sqrt(np.mean(deltas ** 2)))

        self.running_average_error = (
            (self.running_average_error * self.averaging_factor + self.current_error)
            / (self.averaging_factor + 1.0)
        )

        for neuron, target in zip(output_layer.regular, targets):
            neuron.compute_output_gradient(target)

        for layer_num in range(len(self.layers) - 2, 0, -1):
            next_layer = self.layers[layer_num + 1]
            for neuron in self.layers[layer_num].regular:
                neuron.compute_hidden_gradient(next_layer)

        for layer_num in range(len(self.layers) - 1, 0, -1):
            previous_layer = self.layers[layer_num - 1]
            for neuron in self.layers[layer_num].regular:
                neuron.apply_weight_updates(previous_layer, self.learning_rate, self.momentum)

        self.training_passes += 1

    def train_step(self, inputs: Sequence[float], targets: Sequence[float]) -> float:
        """
        Single online training step (forward + backward).

        Returns:
            RMS error of this step, measured before the weight update
        """
        # Check both vectors up front so a bad target cannot leave a half-done step
        _as_vector(targets, self.topology[-1], "targets")
        self.feed_forward(inputs)
        self.back_prop(targets)
        return self.current_error

    def get_running_average_error(self) -> float:
        return self.running_average_error

    get_recent_average_error = get_running_average_error

    def get_weights(self) -> List[np.ndarray]:
        """
        Weight matrices between consecutive layers.

        Returns:
            List with entry i of shape (topology[i] + 1, topology[i + 1]), bias row last
        """
        return [layer.weight_matrix() for layer in self.layers[:-1]]

    def set_weights(self, weights: Sequence[np.ndarray]):
        """
        Replace every weight and clear the momentum memory.

        Args:
            weights: Matrices shaped like the result of get_weights()
        """
        if len(weights) != len(self.layers) - 1:
            raise ContractViolation(
                f"Expected {len(self.layers) - 1} weight matrices, got {len(weights)}"
            )

        matrices = []
        for i, matrix in enumerate(weights):
            matrix = np.asarray(matrix, dtype=float)
            expected = (self.topology[i] + 1, self.topology[i + 1])
            if matrix.shape != expected:
                raise ContractViolation(
                    f"Weight matrix {i} must have shape {expected}, got {matrix.shape}"
                )
            matrices.append(matrix)

        for layer, matrix in zip(self.layers, matrices):
            for neuron, row in zip(layer.neurons, matrix):
                for connection, weight in zip(neuron.connections, row):
                    connection.weight = float(weight)
                    connection.last_delta = 0.0

    def get_network_stats(self) -> Dict:
        """Summary of structure and training state."""
        return {
            'topology': list(self.topology),
            'total_layers': len(self.layers),
            'total_neurons': sum(len(layer) for layer in self.layers),
            'total_connections': sum(len(layer) * layer.num_outputs for layer in self.layers),
            'training_passes': self.training_passes,
            'current_error': self.current_error,
            'recent_average_error': self.running_average_error,
            'learning_rate': self.learning_rate,
            'momentum': self.momentum,
        }

    def __repr__(self):
        topology = "-".join(str(n) for n in self.topology)
        return (f"Network(topology={topology}, passes={self.training_passes}, "
                f"avg_error={self.running_average_error:.4f})")
