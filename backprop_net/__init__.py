"""
Online Backpropagation Network Package

A fully-connected feedforward network with tanh units, trained one example
at a time by gradient descent with momentum.
"""

from .connection import Connection
from .neuron import Neuron
from .layer import Layer
from .network import Network
from .weight_init import WeightInitializer, ConstantInitializer
from .exceptions import ContractViolation, MalformedRecord
from .training_data import TrainingData, InMemoryTrainingData, XOR_SAMPLES
from .trainer import Trainer, TrainingReport, build_network
from .checkpoint import save_network, load_network

__all__ = [
    'Connection',
    'Neuron',
    'Layer',
    'Network',
    'WeightInitializer',
    'ConstantInitializer',
    'ContractViolation',
    'MalformedRecord',
    'TrainingData',
    'InMemoryTrainingData',
    'XOR_SAMPLES',
    'Trainer',
    'TrainingReport',
    'build_network',
    'save_network',
    'load_network',
]
