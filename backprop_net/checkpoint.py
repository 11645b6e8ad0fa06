import os
import pickle
from typing import List, Optional

from .network import Network

CHECKPOINT_DIR = "checkpoints"
NETWORK_CHECKPOINT = os.path.join(CHECKPOINT_DIR, "network_state.pkl")


def save_network(network: Network,
                 filepath: str = NETWORK_CHECKPOINT,
                 error_history: Optional[List[float]] = None):
    """
    Save the entire network state to disk.

    Args:
        network: Network to pickle
        filepath: Destination path (parent directories are created)
        error_history: Running average error per pass, kept for plotting
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    state = {
        'network': network,
        'training_passes': network.training_passes,
        'error_history': list(error_history or []),
    }

    with open(filepath, 'wb') as f:
        pickle.dump(state, f)


def load_checkpoint(filepath: str = NETWORK_CHECKPOINT) -> Optional[dict]:
    """Load the raw checkpoint dict, or None if there is no checkpoint."""
    if not os.path.exists(filepath):
        return None

    with open(filepath, 'rb') as f:
        return pickle.load(f)


def load_network(filepath: str = NETWORK_CHECKPOINT) -> Optional[Network]:
    """Load a network from disk, or None if there is no checkpoint."""
    state = load_checkpoint(filepath)
    if state is None:
        return None
    return state['network']
