import os
import sys

import numpy as np

from backprop_net import (ContractViolation, Network, Trainer, TrainingData, XOR_SAMPLES,
                          load_network, save_network)
from backprop_net.checkpoint import NETWORK_CHECKPOINT
from backprop_net.training_data import write_xor_samples


# ============================================================================
# CONFIGURATION
# ============================================================================

DATA_FILE = os.path.join("data", "trainingData.txt")
GENERATED_SAMPLES = 2000  # Pairs written when the data file is missing
DEFAULT_TOPOLOGY = (2, 4, 1)
LEARNING_RATE = 0.15
MOMENTUM = 0.5
AVERAGING_FACTOR = 100.0
PRINT_INTERVAL = 100  # Print status every N passes


def get_option(name, default=None, cast=str):
    """Value following a command-line flag, or the default."""
    if name not in sys.argv:
        return default
    position = sys.argv.index(name)
    if position + 1 >= len(sys.argv):
        print(f"Missing value for {name}")
        sys.exit(2)
    try:
        return cast(sys.argv[position + 1])
    except ValueError:
        print(f"Invalid value for {name}: {sys.argv[position + 1]!r}")
        sys.exit(2)


def test_network(network):
    """Show the network's answers on the four XOR pairs."""
    print("\n" + "="*70)
    print(f"TESTING NETWORK (after {network.training_passes} training passes)")
    print("="*70)

    if network.topology[0] != 2 or network.topology[-1] != 1:
        print(f"Topology {list(network.topology)} is not an XOR network, skipping")
        return

    trainer = Trainer(network)
    correct = 0
    for row in trainer.evaluate(XOR_SAMPLES):
        a, b = row['inputs']
        expected = row['targets'][0]
        pred = row['outputs'][0]
        ok = abs(pred - expected) < 0.5
        correct += ok
        status = "✓" if ok else "✗"
        print(f"  {a:.0f} xor {b:.0f} = {expected:.0f} | Predicted: {pred:+.3f} | {status}")

    print("-"*70)
    print(f"Accuracy: {correct}/{len(XOR_SAMPLES)}")
    print("="*70 + "\n")


def main():
    data_file = get_option("--data", DATA_FILE)
    max_passes = get_option("--passes", None, int)
    target_error = get_option("--target-error", None, float)
    seed = get_option("--seed", None, int)

    if "--test" in sys.argv:
        network = load_network(NETWORK_CHECKPOINT)
        if network is None:
            print("No saved network found!")
            sys.exit(1)
        test_network(network)
        return

    if not os.path.exists(data_file):
        print(f"  Writing {GENERATED_SAMPLES} XOR samples to {data_file}")
        write_xor_samples(data_file, GENERATED_SAMPLES, topology=DEFAULT_TOPOLOGY, seed=seed)

    print("\n" + "="*70)
    print("ONLINE BACKPROPAGATION TRAINING")
    print("="*70)
    print("\nUsage:")
    print("  python train.py                  - Continue training the saved network")
    print("  python train.py --new            - Start fresh")
    print("  python train.py --test           - Test only (no training)")
    print("  python train.py --data PATH      - Train from a record file")
    print("  python train.py --passes N       - Stop after N passes")
    print("  python train.py --target-error E - Stop once the average error is below E")
    print("  python train.py --seed N         - Seed weight initialization")
    print("="*70)

    with TrainingData(data_file) as source:
        network = None
        if "--new" not in sys.argv:
            network = load_network(NETWORK_CHECKPOINT)

        topology = source.get_topology()
        if network is not None and list(network.topology) != topology:
            print(f"  Saved network has topology {list(network.topology)}, "
                  f"data wants {topology}; starting fresh")
            network = None

        if network is None:
            print(f"\n  Creating new network with topology {topology}...")
            network = Network(
                topology,
                learning_rate=LEARNING_RATE,
                momentum=MOMENTUM,
                averaging_factor=AVERAGING_FACTOR,
                seed=seed,
            )
        else:
            print(f"  ✓ Network loaded from checkpoint (passes: {network.training_passes})")

        trainer = Trainer(network, print_interval=PRINT_INTERVAL)
        report = trainer.run(source, max_passes=max_passes, target_error=target_error)

    print(f"\nDone: {report.passes} passes, stopped on {report.stop_reason}, "
          f"recent average error {network.get_recent_average_error():.4f}")
    if report.errors:
        print(f"Mean RMS error over the run: {np.mean(report.errors):.4f}")

    save_network(network, NETWORK_CHECKPOINT, error_history=report.average_errors)
    print(f"  💾 Network saved to {NETWORK_CHECKPOINT}")

    test_network(network)


if __name__ == "__main__":
    try:
        main()
    except ContractViolation as e:
        print(f"✗ {e}")
        sys.exit(1)
