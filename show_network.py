"""
Network Visualization Script
Prints the structure of the saved network and writes PNG diagrams
"""

import sys

from backprop_net.checkpoint import NETWORK_CHECKPOINT, load_checkpoint
from backprop_net.visualize import describe_network, generate_network_image, plot_error_history

NETWORK_IMAGE = "output/network_visualization.png"
ERROR_IMAGE = "output/error_history.png"


def main():
    """Main visualization function"""
    print("\n🔍 Loading Neural Network...")

    checkpoint_path = sys.argv[1] if len(sys.argv) > 1 else NETWORK_CHECKPOINT
    state = load_checkpoint(checkpoint_path)
    if state is None:
        print("❌ No checkpoint found. Train the network first with:")
        print("   python train.py --new")
        sys.exit(1)

    network = state['network']
    print("✓ Network loaded successfully!")

    print(describe_network(network))

    generate_network_image(network, NETWORK_IMAGE)
    print(f"\n✓ Network visualization saved to: {NETWORK_IMAGE}")

    if state.get('error_history'):
        plot_error_history(state['error_history'], ERROR_IMAGE)
        print(f"✓ Error history saved to: {ERROR_IMAGE}")

    print("=" * 80)
    print()


if __name__ == "__main__":
    main()
