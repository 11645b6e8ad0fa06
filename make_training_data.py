"""
Write a record file of random XOR training pairs.

Usage:
    python make_training_data.py [PATH] [COUNT] [SEED]
"""
import os
import sys

from backprop_net.training_data import write_xor_samples

DEFAULT_PATH = os.path.join("data", "trainingData.txt")
DEFAULT_COUNT = 2000
TOPOLOGY = (2, 4, 1)


if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PATH
    count = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_COUNT
    seed = int(sys.argv[3]) if len(sys.argv) > 3 else None

    write_xor_samples(path, count, topology=TOPOLOGY, seed=seed)
    print(f"Wrote {count} XOR samples (topology {' '.join(map(str, TOPOLOGY))}) to {path}")
