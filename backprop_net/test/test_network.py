import math
import unittest

import numpy as np

from backprop_net.exceptions import ContractViolation
from backprop_net.network import Network, DEFAULT_AVERAGING_FACTOR
from backprop_net.trainer import Trainer
from backprop_net.training_data import InMemoryTrainingData, XOR_SAMPLES
from backprop_net.weight_init import ConstantInitializer, WeightInitializer


def _snapshot(network):
    """Every piece of mutable state in the network."""
    state = []
    for layer in network.layers:
        for neuron in layer:
            state.append((neuron.output_value, neuron.gradient,
                          tuple((c.weight, c.last_delta) for c in neuron.connections)))
    return state, network.current_error, network.running_average_error, network.training_passes


class TestConstruction(unittest.TestCase):

    def test_layers_follow_topology(self):
        for topology in [[1, 1], [2, 2, 1], [3, 5, 4, 2], [4, 1, 6]]:
            network = Network(topology, seed=0)
            self.assertEqual(len(network.layers), len(topology))

            for i, layer in enumerate(network.layers):
                self.assertEqual(len(layer), topology[i] + 1)
                self.assertTrue(layer.bias.is_bias)
                self.assertEqual(layer.bias.output_value, 1.0)
                self.assertFalse(any(n.is_bias for n in layer.regular))

                expected = topology[i + 1] if i < len(topology) - 1 else 0
                for neuron in layer:
                    self.assertEqual(len(neuron.connections), expected)
                    for connection in neuron.connections:
                        self.assertGreaterEqual(connection.weight, 0.0)
                        self.assertLess(connection.weight, 1.0)
                        self.assertEqual(connection.last_delta, 0.0)

    def test_results_length(self):
        rs = np.random.RandomState(1)
        for topology in [[1, 1], [2, 3, 1], [3, 4, 5], [2, 2, 2, 7]]:
            network = Network(topology, seed=2)
            self.assertEqual(len(network.get_results()), topology[-1])
            network.feed_forward(rs.uniform(-1, 1, topology[0]))
            self.assertEqual(len(network.get_results()), topology[-1])

    def test_seeded_initialization_is_reproducible(self):
        first = Network([3, 4, 2], seed=42).get_weights()
        second = Network([3, 4, 2], seed=42).get_weights()
        other = Network([3, 4, 2], seed=43).get_weights()

        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)
        self.assertFalse(all(np.array_equal(a, c) for a, c in zip(first, other)))

    def test_injected_initializer(self):
        network = Network([2, 3, 1], initializer=WeightInitializer(5))
        again = Network([2, 3, 1], seed=5)
        for a, b in zip(network.get_weights(), again.get_weights()):
            np.testing.assert_array_equal(a, b)

    def test_invalid_topology(self):
        for topology in [[], [3], [2, 0, 1], [2, -1], [2.5, 1], [True, 1], None, "21"]:
            with self.assertRaises(ContractViolation):
                Network(topology)

    def test_invalid_configuration(self):
        with self.assertRaises(ContractViolation):
            Network([2, 1], learning_rate=-0.1)
        with self.assertRaises(ContractViolation):
            Network([2, 1], momentum=-1.0)
        with self.assertRaises(ContractViolation):
            Network([2, 1], averaging_factor=0.0)

    def test_non_numeric_configuration(self):
        nan = float('nan')
        for config in [dict(learning_rate=nan), dict(momentum=nan), dict(averaging_factor=nan),
                       dict(learning_rate=float('inf')), dict(averaging_factor=float('inf')),
                       dict(learning_rate="0.1"), dict(momentum=None), dict(averaging_factor=True)]:
            with self.assertRaises(ContractViolation):
                Network([2, 1], **config)

    def test_numpy_configuration_accepted(self):
        network = Network([2, 1], learning_rate=np.float64(0.2), momentum=np.float32(0.25), seed=0)
        self.assertEqual(network.learning_rate, 0.2)
        self.assertIsInstance(network.momentum, float)

    def test_configuration_is_per_instance(self):
        slow = Network([2, 1], learning_rate=0.01, momentum=0.0, seed=0)
        fast = Network([2, 1], seed=0)
        self.assertEqual(slow.learning_rate, 0.01)
        self.assertEqual(slow.momentum, 0.0)
        self.assertEqual(fast.learning_rate, 0.15)
        self.assertEqual(fast.momentum, 0.5)
        self.assertEqual(fast.averaging_factor, DEFAULT_AVERAGING_FACTOR)


class TestFeedForward(unittest.TestCase):

    def test_outputs_within_tanh_range(self):
        rs = np.random.RandomState(3)
        network = Network([3, 5, 4, 2], seed=11)
        for _ in range(50):
            network.feed_forward(rs.uniform(-1, 1, 3))
            for layer in network.layers[1:]:
                for neuron in layer.regular:
                    self.assertGreater(neuron.output_value, -1.0)
                    self.assertLess(neuron.output_value, 1.0)

    def test_deterministic_with_fixed_weights(self):
        network = Network([2, 3, 2], initializer=ConstantInitializer(0.25))
        network.feed_forward([0.3, -0.7])
        first = network.get_results()
        network.feed_forward([0.9, 0.1])
        network.feed_forward([0.3, -0.7])
        np.testing.assert_array_equal(first, network.get_results())

    def test_hand_computed_output(self):
        network = Network([2, 1], initializer=ConstantInitializer(0.5))
        result = network.predict([1.0, -0.4])
        self.assertAlmostEqual(result[0], math.tanh(0.5 - 0.2 + 0.5))

    def test_bias_never_changes(self):
        network = Network([2, 3, 1], seed=4)
        trainer = Trainer(network)
        trainer.run(InMemoryTrainingData([2, 3, 1], XOR_SAMPLES, passes=50))
        for layer in network.layers:
            self.assertEqual(layer.bias.output_value, 1.0)

    def test_wrong_input_length_leaves_state(self):
        network = Network([3, 2, 1], seed=6)
        network.train_step([0.1, 0.2, 0.3], [0.5])
        before = _snapshot(network)

        for inputs in [[0.1, 0.2], [0.1, 0.2, 0.3, 0.4], [], [[0.1, 0.2, 0.3]], ["a", "b", "c"]]:
            with self.assertRaises(ContractViolation):
                network.feed_forward(inputs)
            self.assertEqual(_snapshot(network), before)


class TestBackProp(unittest.TestCase):

    def test_single_output_rms_is_absolute_error(self):
        network = Network([1, 1], initializer=ConstantInitializer(0.0))
        network.set_weights([np.array([[0.0], [np.arctanh(0.6)]])])
        network.feed_forward([0.0])
        self.assertAlmostEqual(network.get_results()[0], 0.6)

        network.back_prop([1.0])
        self.assertAlmostEqual(network.current_error, 0.4)
        self.assertAlmostEqual(network.get_recent_average_error(), 0.4 / 101.0)

    def test_multi_output_rms(self):
        network = Network([1, 2], initializer=ConstantInitializer(0.0))
        network.set_weights([np.array([[0.0, 0.0], [np.arctanh(0.5), np.arctanh(-0.5)]])])
        network.feed_forward([0.0])
        network.back_prop([1.0, 0.0])
        self.assertAlmostEqual(network.current_error, 0.5)

    def test_running_average(self):
        network = Network([1, 1], averaging_factor=3.0, initializer=ConstantInitializer(0.0))
        network.feed_forward([0.0])
        network.back_prop([0.5])
        self.assertAlmostEqual(network.running_average_error, 0.5 / 4.0)

    def test_hand_computed_update(self):
        network = Network([1, 1, 1], initializer=ConstantInitializer(0.5))
        network.feed_forward([1.0])

        h = math.tanh(1.0)
        o = math.tanh(0.5 * h + 0.5)
        self.assertAlmostEqual(network.get_results()[0], o)

        network.back_prop([1.0])

        grad_o = (1.0 - o) * (1.0 - o * o)
        # Hidden gradient uses the weight from before the update
        grad_h = 0.5 * grad_o * (1.0 - h * h)
        self.assertAlmostEqual(network.output_layer[0].gradient, grad_o)
        self.assertAlmostEqual(network.layers[1][0].gradient, grad_h)

        hidden_weights, input_weights = network.get_weights()[1], network.get_weights()[0]
        self.assertAlmostEqual(hidden_weights[0, 0], 0.5 + 0.15 * h * grad_o)
        self.assertAlmostEqual(hidden_weights[1, 0], 0.5 + 0.15 * grad_o)
        self.assertAlmostEqual(input_weights[0, 0], 0.5 + 0.15 * grad_h)
        self.assertAlmostEqual(input_weights[1, 0], 0.5 + 0.15 * grad_h)

    def test_zero_learning_rate_freezes_weights(self):
        network = Network([2, 3, 1], learning_rate=0.0, seed=9)
        before = network.get_weights()
        for _ in range(25):
            for inputs, targets in XOR_SAMPLES:
                network.train_step(inputs, targets)
        for a, b in zip(before, network.get_weights()):
            np.testing.assert_array_equal(a, b)

    def test_zero_momentum_ignores_history(self):
        network = Network([2, 2, 1], momentum=0.0, seed=10)
        for inputs, targets in XOR_SAMPLES * 3:
            network.train_step(inputs, targets)

            for layer_num in range(1, len(network.layers)):
                previous = network.layers[layer_num - 1]
                for neuron in network.layers[layer_num].regular:
                    for source in previous:
                        expected = 0.15 * source.output_value * neuron.gradient
                        self.assertAlmostEqual(source.connections[neuron.index].last_delta, expected)

    def test_momentum_carries_previous_delta(self):
        network = Network([1, 1], momentum=0.5, initializer=ConstantInitializer(0.1))
        network.train_step([1.0], [1.0])
        first_delta = network.input_layer[0].connections[0].last_delta

        network.feed_forward([1.0])
        network.back_prop([1.0])
        gradient_before = network.output_layer[0].gradient
        second_delta = network.input_layer[0].connections[0].last_delta
        self.assertAlmostEqual(second_delta, 0.15 * gradient_before + 0.5 * first_delta)

    def test_wrong_target_length_leaves_state(self):
        network = Network([2, 2, 2], seed=12)
        network.train_step([0.5, -0.5], [0.1, 0.2])
        network.feed_forward([0.2, 0.4])
        before = _snapshot(network)

        for targets in [[0.1], [0.1, 0.2, 0.3], [], ["x", "y"]]:
            with self.assertRaises(ContractViolation):
                network.back_prop(targets)
            self.assertEqual(_snapshot(network), before)

    def test_train_step_checks_targets_first(self):
        network = Network([2, 1], seed=13)
        before = _snapshot(network)
        with self.assertRaises(ContractViolation):
            network.train_step([0.3, 0.3], [0.1, 0.1])
        self.assertEqual(_snapshot(network), before)


class TestWeights(unittest.TestCase):

    def test_set_weights_round_trip(self):
        network = Network([2, 3, 1], seed=14)
        weights = [np.full((3, 3), 0.1), np.full((4, 1), -0.2)]
        network.set_weights(weights)
        for a, b in zip(weights, network.get_weights()):
            np.testing.assert_array_equal(a, b)

    def test_set_weights_rejects_bad_shapes(self):
        network = Network([2, 3, 1], seed=15)
        before = network.get_weights()
        with self.assertRaises(ContractViolation):
            network.set_weights([np.zeros((3, 3))])
        with self.assertRaises(ContractViolation):
            network.set_weights([np.zeros((3, 3)), np.zeros((3, 1))])
        for a, b in zip(before, network.get_weights()):
            np.testing.assert_array_equal(a, b)

    def test_network_stats(self):
        network = Network([2, 3, 1], seed=16)
        stats = network.get_network_stats()
        self.assertEqual(stats['topology'], [2, 3, 1])
        self.assertEqual(stats['total_layers'], 3)
        self.assertEqual(stats['total_neurons'], 3 + 4 + 2)
        self.assertEqual(stats['total_connections'], 3 * 3 + 4 * 1)
        self.assertEqual(stats['training_passes'], 0)


class TestConvergence(unittest.TestCase):

    def test_xor_converges(self):
        final_errors = []
        for seed in range(5):
            network = Network([2, 2, 1], seed=seed)
            source = InMemoryTrainingData([2, 2, 1], XOR_SAMPLES, passes=6000)
            report = Trainer(network).run(source, target_error=0.05)
            final_errors.append(report.final_average_error)

        self.assertLess(min(final_errors), 0.05)


if __name__ == '__main__':
    unittest.main()
