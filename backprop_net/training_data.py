"""
Training-record sources.

A source hands out a topology once, then (inputs, targets) pairs until it
runs dry. Running dry is not an error: the next input vector comes back
empty and is_exhausted() turns True.

Record file format, one record per line:

    topology: 2 4 1
    in: 1.0 0.0
    out: 1.0
"""
import os

import numpy as np
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import ContractViolation, MalformedRecord
from .network import validate_topology

TOPOLOGY_LABEL = "topology:"
INPUT_LABEL = "in:"
OUTPUT_LABEL = "out:"

XOR_SAMPLES = [
    ([0.0, 0.0], [0.0]),
    ([0.0, 1.0], [1.0]),
    ([1.0, 0.0], [1.0]),
    ([1.0, 1.0], [0.0]),
]


class TrainingSource:
    """Interface shared by every training-record source."""

    def get_topology(self) -> List[int]:
        raise NotImplementedError

    def get_next_inputs(self) -> np.ndarray:
        raise NotImplementedError

    def get_target_outputs(self) -> np.ndarray:
        raise NotImplementedError

    def is_exhausted(self) -> bool:
        raise NotImplementedError


def _parse_values(tokens: Sequence[str], line: str) -> np.ndarray:
    try:
        return np.array([float(t) for t in tokens], dtype=float)
    except ValueError:
        raise MalformedRecord(f"Non-numeric value in record: {line.strip()!r}")


class TrainingData(TrainingSource):
    """
    Reads training records from a text file.

    Lines whose label does not match what is asked for yield an empty vector,
    which the driver treats as the end of the data.
    """

    def __init__(self, path: str):
        """
        Args:
            path: Path to the record file
        """
        self.path = path
        self._file = open(path, 'r')
        self._pending = self._file.readline()

    def _next_line(self) -> str:
        line = self._pending
        self._pending = self._file.readline() if line else ''
        return line

    def is_exhausted(self) -> bool:
        return self._pending == ''

    def get_topology(self) -> List[int]:
        """
        Read the topology record. Must be called once, before any other read.

        Returns:
            Neuron counts per layer
        """
        line = self._next_line()
        tokens = line.split()
        if not tokens or tokens[0] != TOPOLOGY_LABEL:
            raise MalformedRecord(f"{self.path}: expected a '{TOPOLOGY_LABEL}' record, got {line.strip()!r}")

        try:
            values = [int(t) for t in tokens[1:]]
        except ValueError:
            raise MalformedRecord(f"{self.path}: non-integer layer size in {line.strip()!r}")

        try:
            return list(validate_topology(values))
        except ContractViolation as e:
            raise MalformedRecord(f"{self.path}: {e}")

    def _read_vector(self, label: str) -> np.ndarray:
        line = self._next_line()
        tokens = line.split()
        if not tokens or tokens[0] != label:
            return np.zeros(0)
        return _parse_values(tokens[1:], line)

    def get_next_inputs(self) -> np.ndarray:
        return self._read_vector(INPUT_LABEL)

    def get_target_outputs(self) -> np.ndarray:
        return self._read_vector(OUTPUT_LABEL)

    def close(self):
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return f"TrainingData(path={self.path!r})"


class InMemoryTrainingData(TrainingSource):
    """
    Replays a fixed list of (inputs, targets) pairs.

    Attributes:
        topology: Network shape handed out by get_topology()
        samples: Training pairs in replay order
        passes: Number of times the whole list is replayed
    """

    def __init__(self,
                 topology: Sequence[int],
                 samples: Iterable[Tuple[Sequence[float], Sequence[float]]],
                 passes: int = 1):
        self.topology = list(validate_topology(topology))
        self.samples = [(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
                        for x, y in samples]
        self.passes = passes
        self._position = 0
        self._current: Optional[Tuple[np.ndarray, np.ndarray]] = None

    def __len__(self) -> int:
        return len(self.samples) * self.passes

    def is_exhausted(self) -> bool:
        return self._position >= len(self)

    def get_topology(self) -> List[int]:
        return list(self.topology)

    def get_next_inputs(self) -> np.ndarray:
        if self.is_exhausted():
            self._current = None
            return np.zeros(0)
        self._current = self.samples[self._position % len(self.samples)]
        self._position += 1
        return self._current[0].copy()

    def get_target_outputs(self) -> np.ndarray:
        if self._current is None:
            return np.zeros(0)
        return self._current[1].copy()

    def __repr__(self):
        return f"InMemoryTrainingData(samples={len(self.samples)}, passes={self.passes})"


def _format_values(values: Iterable[float]) -> str:
    return " ".join(f"{v:.1f}" for v in values)


def write_samples(path: str,
                  topology: Sequence[int],
                  samples: Iterable[Tuple[Sequence[float], Sequence[float]]]):
    """
    Write a record file.

    Args:
        path: Destination file (parent directories are created)
        topology: Network shape for the topology record
        samples: (inputs, targets) pairs
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        f.write(f"{TOPOLOGY_LABEL} {' '.join(str(n) for n in topology)}\n")
        for inputs, targets in samples:
            f.write(f"{INPUT_LABEL} {_format_values(inputs)}\n")
            f.write(f"{OUTPUT_LABEL} {_format_values(targets)}\n")


def generate_xor_samples(count: int, seed: Optional[int] = None) -> List[Tuple[List[float], List[float]]]:
    """
    Draw random XOR training pairs.

    Args:
        count: Number of pairs
        seed: Seed for reproducible data

    Returns:
        List of ([a, b], [a xor b]) pairs with a, b in {0, 1}
    """
    rs = np.random.RandomState(seed)
    bits = rs.randint(0, 2, size=(count, 2))
    return [([float(a), float(b)], [float(a ^ b)]) for a, b in bits]


def write_xor_samples(path: str,
                      count: int,
                      topology: Sequence[int] = (2, 4, 1),
                      seed: Optional[int] = None):
    """Write a record file of random XOR pairs."""
    topology = validate_topology(topology)
    if topology[0] != 2 or topology[-1] != 1:
        raise ContractViolation(f"XOR data needs 2 inputs and 1 output, got topology {list(topology)}")
    write_samples(path, topology, generate_xor_samples(count, seed=seed))
