import numpy as np
from typing import Iterator, List

from .neuron import Neuron


class Layer:
    """
    An ordered collection of regular neurons followed by one bias unit.

    Attributes:
        neurons: All neurons of the layer, bias unit last
        num_outputs: Outgoing connections per neuron (0 for the output layer)
    """

    def __init__(self, size: int, num_outputs: int, initializer=None):
        """
        Initialize a layer.

        Args:
            size: Number of regular neurons
            num_outputs: Number of regular neurons in the next layer
            initializer: Source of initial weights with a draw(count) method
        """
        self.num_outputs = num_outputs
        self.neurons: List[Neuron] = [
            Neuron(num_outputs, i, initializer=initializer) for i in range(size)
        ]
        self.neurons.append(Neuron.bias(num_outputs, size, initializer=initializer))

    @property
    def regular(self) -> List[Neuron]:
        """Neurons that take part in evaluation and gradients."""
        return [n for n in self.neurons if not n.is_bias]

    @property
    def bias(self) -> Neuron:
        return self.neurons[-1]

    @property
    def size(self) -> int:
        """Number of regular neurons."""
        return len(self.neurons) - 1

    def outputs(self) -> np.ndarray:
        """Output values of the regular neurons in index order."""
        return np.array([n.output_value for n in self.regular], dtype=float)

    def weight_matrix(self) -> np.ndarray:
        """
        Outgoing weights of the layer.

        Returns:
            Array of shape (size + 1, num_outputs), bias row last
        """
        if self.num_outputs == 0:
            return np.zeros((len(self.neurons), 0))
        return np.vstack([n.outgoing_weights() for n in self.neurons])

    def __len__(self) -> int:
        return len(self.neurons)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self.neurons)

    def __getitem__(self, index: int) -> Neuron:
        return self.neurons[index]

    def __repr__(self):
        return f"Layer(size={self.size}, num_outputs={self.num_outputs})"
