"""
Network inspection: ASCII structure dump, weight diagram and error curve.
"""
import os
from datetime import datetime

import numpy as np
import matplotlib.pyplot as plt

from .network import Network

STRONG_WEIGHT = 2.0
MEDIUM_WEIGHT = 0.5


def _layer_name(layer_idx: int, n_layers: int) -> str:
    if layer_idx == 0:
        return "INPUT"
    if layer_idx == n_layers - 1:
        return "OUTPUT"
    return f"HIDDEN {layer_idx}"


def _ensure_parent(path: str):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def describe_network(network: Network) -> str:
    """Multi-line ASCII description of layers, neurons and weights."""
    lines = []
    stats = network.get_network_stats()
    n_layers = len(network.layers)

    lines.append("=" * 80)
    lines.append("NEURAL NETWORK STRUCTURE")
    lines.append("=" * 80)
    lines.append(f"Topology: {' '.join(str(n) for n in stats['topology'])}")
    lines.append(f"Neurons (incl. bias): {stats['total_neurons']} | "
                 f"Connections: {stats['total_connections']}")
    lines.append(f"Training passes: {stats['training_passes']} | "
                 f"Recent average error: {stats['recent_average_error']:.4f}")
    lines.append(f"Learning rate: {stats['learning_rate']} | Momentum: {stats['momentum']}")

    for layer_idx, layer in enumerate(network.layers):
        lines.append("")
        lines.append(f"  Layer {layer_idx} [{_layer_name(layer_idx, n_layers)}]")
        for neuron in layer:
            label = "B " if neuron.is_bias else f"N{neuron.index}"
            line = f"    {label} output={neuron.output_value:+.4f}"
            if neuron.connections:
                weights = ", ".join(f"{w:+.3f}" for w in neuron.outgoing_weights())
                line += f" -> [{weights}]"
            lines.append(line)

    for layer_idx, matrix in enumerate(network.get_weights()):
        lines.append("")
        lines.append(f"  Layer {layer_idx} -> Layer {layer_idx + 1}: "
                     f"mean={np.mean(matrix):+.3f}, std={np.std(matrix):.3f}, "
                     f"range=[{np.min(matrix):+.3f}, {np.max(matrix):+.3f}]")

    return "\n".join(lines)


def generate_network_image(network: Network, output_path: str = "output/network_visualization.png"):
    """
    Draw neurons as circles and connections as lines whose width follows
    the weight magnitude (blue positive, red negative).
    """
    fig, ax = plt.subplots(figsize=(12, 8))
    ax.set_aspect('equal')
    ax.axis('off')

    n_layers = len(network.layers)
    layer_spacing = 1.0 / (n_layers + 1)
    neuron_positions = {}

    for layer_idx, layer in enumerate(network.layers):
        n_neurons = len(layer)
        x = layer_spacing * (layer_idx + 1)

        if n_neurons == 1:
            y_positions = [0.5]
        else:
            y_spacing = 0.8 / (n_neurons - 1)
            y_start = 0.5 - (n_neurons - 1) * y_spacing / 2
            y_positions = [y_start + i * y_spacing for i in range(n_neurons)]

        for neuron, y in zip(layer, y_positions):
            neuron_positions[(layer_idx, neuron.index)] = (x, y)
            color = '#95a5a6' if neuron.is_bias else '#2ecc71'
            circle = plt.Circle((x, y), 0.02, color=color, ec='#2c3e50',
                                linewidth=1.5, zorder=3)
            ax.add_patch(circle)
            ax.text(x, y, "B" if neuron.is_bias else f"N{neuron.index}",
                    ha='center', va='center', fontsize=6, fontweight='bold',
                    color='white', zorder=4)

    for layer_idx in range(n_layers - 1):
        for neuron in network.layers[layer_idx]:
            x1, y1 = neuron_positions[(layer_idx, neuron.index)]
            for next_idx, connection in enumerate(neuron.connections):
                x2, y2 = neuron_positions[(layer_idx + 1, next_idx)]
                magnitude = abs(connection.weight)
                if magnitude > STRONG_WEIGHT:
                    alpha, linewidth = 0.8, 2.5
                elif magnitude > MEDIUM_WEIGHT:
                    alpha, linewidth = 0.5, 1.5
                else:
                    alpha, linewidth = 0.2, 0.5
                color = '#3498db' if connection.weight >= 0 else '#e74c3c'
                ax.plot([x1, x2], [y1, y2], color=color, alpha=alpha,
                        linewidth=linewidth, zorder=1)

    for layer_idx in range(n_layers):
        x = layer_spacing * (layer_idx + 1)
        label = f"{_layer_name(layer_idx, n_layers)}\n({network.topology[layer_idx]} + bias)"
        ax.text(x, 0.98, label, ha='center', va='top', fontsize=9, fontweight='bold',
                bbox=dict(boxstyle='round,pad=0.4', facecolor='lightgray', alpha=0.8))

    title = (f"Network {'-'.join(str(n) for n in network.topology)} | "
             f"Passes: {network.training_passes} | "
             f"Avg Error: {network.get_recent_average_error():.4f}")
    ax.text(0.5, 1.04, title, ha='center', va='top', fontsize=11,
            fontweight='bold', transform=ax.transAxes)

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    ax.text(0.99, 0.01, f"Generated: {timestamp}", ha='right', va='bottom',
            fontsize=7, style='italic', transform=ax.transAxes, alpha=0.6)

    ax.set_xlim(-0.05, 1.05)
    ax.set_ylim(0.0, 1.05)

    _ensure_parent(output_path)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight', facecolor='white')
    plt.close(fig)


def plot_error_history(error_history, output_path: str = "output/error_history.png"):
    """Plot the running average error against the training pass."""
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(np.arange(1, len(error_history) + 1), error_history, 'r-', linewidth=1.5)
    ax.set_xlabel('Training pass')
    ax.set_ylabel('Recent average error')
    ax.set_title('Error Progress')
    ax.grid(True, alpha=0.3)

    _ensure_parent(output_path)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
