import numpy as np
from typing import List, Optional

from .exceptions import ContractViolation
from .network import Network
from .training_data import TrainingSource

STOP_EXHAUSTED = "exhausted"
STOP_MAX_PASSES = "max_passes"
STOP_TARGET_ERROR = "target_error"


def build_network(source: TrainingSource, **config) -> Network:
    """
    Read the topology from a source and build a network for it.

    Args:
        source: Training-record source, before any pair has been read
        **config: Keyword arguments forwarded to Network

    Returns:
        Freshly initialized network
    """
    return Network(source.get_topology(), **config)


class TrainingReport:
    """
    Outcome of a training run.

    Attributes:
        passes: Number of training pairs consumed
        errors: RMS error of every pass
        average_errors: Running average error after every pass
        stop_reason: Why the loop ended
    """

    def __init__(self):
        self.passes = 0
        self.errors: List[float] = []
        self.average_errors: List[float] = []
        self.stop_reason: Optional[str] = None

    @property
    def final_average_error(self) -> float:
        return self.average_errors[-1] if self.average_errors else 0.0

    def record(self, error: float, average_error: float):
        self.passes += 1
        self.errors.append(error)
        self.average_errors.append(average_error)

    def __repr__(self):
        return (f"TrainingReport(passes={self.passes}, "
                f"avg_error={self.final_average_error:.4f}, stop={self.stop_reason})")


class Trainer:
    """Drives online training of a network from a training-record source."""

    def __init__(self, network: Network, print_interval: int = 0):
        """
        Args:
            network: Network to train
            print_interval: Print a status line every N passes (0 disables)
        """
        self.network = network
        self.print_interval = print_interval

    def run(self,
            source: TrainingSource,
            max_passes: Optional[int] = None,
            target_error: Optional[float] = None) -> TrainingReport:
        """
        Train until the source runs dry, max_passes is reached or the running
        average error falls below target_error.

        A target vector whose length does not match the network raises
        ContractViolation.

        Args:
            source: Source positioned after its topology record
            max_passes: Upper bound on training pairs consumed
            target_error: Stop once the running average error is below this

        Returns:
            TrainingReport for the run
        """
        network = self.network
        num_inputs = network.topology[0]
        num_outputs = network.topology[-1]
        report = TrainingReport()

        while True:
            if source.is_exhausted():
                report.stop_reason = STOP_EXHAUSTED
                break
            if max_passes is not None and report.passes >= max_passes:
                report.stop_reason = STOP_MAX_PASSES
                break

            inputs = source.get_next_inputs()
            if len(inputs) != num_inputs:
                report.stop_reason = STOP_EXHAUSTED
                break

            network.feed_forward(inputs)
            results = network.get_results()

            targets = source.get_target_outputs()
            if len(targets) != num_outputs:
                raise ContractViolation(
                    f"Pass {report.passes + 1}: expected {num_outputs} targets, got {len(targets)}"
                )

            network.back_prop(targets)
            report.record(network.current_error, network.get_recent_average_error())

            if self.print_interval and report.passes % self.print_interval == 0:
                self.print_status(report, inputs, results, targets)

            if (target_error is not None
                    and report.passes >= network.averaging_factor
                    and network.get_recent_average_error() < target_error):
                report.stop_reason = STOP_TARGET_ERROR
                break

        return report

    def print_status(self, report: TrainingReport, inputs: np.ndarray,
                     results: np.ndarray, targets: np.ndarray):
        """Print one progress line."""
        def fmt(values):
            return " ".join(f"{v:+.3f}" for v in values)

        print(f"[Pass {report.passes:6d}] "
              f"Inputs={fmt(inputs)} | "
              f"Outputs={fmt(results)} | "
              f"Targets={fmt(targets)} | "
              f"Error={self.network.current_error:.4f} | "
              f"AvgError={self.network.get_recent_average_error():.4f}")

    def evaluate(self, samples) -> List[dict]:
        """
        Run the network on labelled samples without training.

        Args:
            samples: (inputs, targets) pairs

        Returns:
            One dict per sample with inputs, outputs, targets and RMS error
        """
        rows = []
        for inputs, targets in samples:
            outputs = self.network.predict(inputs)
            targets = np.asarray(targets, dtype=float)
            if targets.shape != outputs.shape:
                raise ContractViolation(f"Expected {len(outputs)} targets, got {targets.shape}")
            rows.append({
                'inputs': np.asarray(inputs, dtype=float),
                'outputs': outputs,
                'targets': targets,
                'error': float(np.sqrt(np.mean((targets - outputs) ** 2))),
            })
        return rows
