"""
Neural network value function for Amarillo.

This module defines a small PyTorch network that maps an encoded position
to one logit per player, and the ValueFunction wrapper used by the search.
It includes:

1. NetworkConfig: architecture and device settings
2. MLP / ValueNetwork: the network itself
3. NetworkValueFunction: inference wrapper with checkpoint loading
"""
import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import torch
import torch.nn as nn
from loguru import logger

from amarillo_ai.core.constants import NUM_PLAYERS
from amarillo_ai.core.game import GameState
from amarillo_ai.value.base import ValueFunction
from amarillo_ai.value.features import FEATURES_PER_PLAYER, encode_state


@dataclass
class NetworkConfig:
    """
    Configuration for the value network.
    """
    hidden_sizes: List[int] = field(default_factory=lambda: [128, 64])
    """Sizes of the hidden layers"""

    activation: str = "relu"
    """Activation function between hidden layers"""

    init_type: str = "orthogonal"
    """Weight initialization method"""

    gain: float = math.sqrt(2)
    """Gain factor for weight initialization"""

    device: str = "cpu"
    """Device to run the model on (cpu or cuda)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.hidden_sizes or any(size <= 0 for size in self.hidden_sizes):
            raise ValueError("hidden_sizes must be a non-empty list of positive sizes")
        if self.activation not in ("relu", "tanh", "elu"):
            raise ValueError(f"Unknown activation: {self.activation}")
        if self.init_type not in ("orthogonal", "xavier"):
            raise ValueError(f"Unknown init_type: {self.init_type}")


def init_weights(module: nn.Module, init_type: str = 'orthogonal', gain: float = 1.0) -> None:
    """
    Initialize linear layer weights.

    Args:
        module: The module to initialize
        init_type: Initialization method ('orthogonal' or 'xavier')
        gain: Gain factor for initialization
    """
    if isinstance(module, nn.Linear):
        if init_type == 'orthogonal':
            nn.init.orthogonal_(module.weight.data, gain=gain)
        elif init_type == 'xavier':
            nn.init.xavier_uniform_(module.weight.data, gain=gain)
        if module.bias is not None:
            nn.init.constant_(module.bias.data, 0)


def get_activation(activation: str) -> nn.Module:
    if activation == 'relu':
        return nn.ReLU()
    elif activation == 'tanh':
        return nn.Tanh()
    elif activation == 'elu':
        return nn.ELU()
    else:
        raise ValueError(f"Unknown activation: {activation}")


class MLP(nn.Module):
    """
    Multi-layer perceptron with configurable hidden layers.
    """

    def __init__(
        self,
        input_dim: int,
        output_dim: int,
        hidden_sizes: List[int],
        activation: str = 'relu',
        init_type: str = 'orthogonal',
        gain: float = math.sqrt(2)
    ):
        super().__init__()
        layers = []
        prev_size = input_dim
        for size in hidden_sizes:
            layers.append(nn.Linear(prev_size, size))
            layers.append(get_activation(activation))
            prev_size = size
        layers.append(nn.Linear(prev_size, output_dim))
        self.model = nn.Sequential(*layers)
        self.apply(lambda m: init_weights(m, init_type, gain))

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.model(x)


class ValueNetwork(nn.Module):
    """
    Value network for position evaluation.

    Takes encoded boards of shape (batch, num_players, FEATURES_PER_PLAYER)
    and outputs one logit per player.
    """

    def __init__(self, config: Optional[NetworkConfig] = None):
        """
        Initialize the value network.

        Args:
            config: Network configuration
        """
        super().__init__()
        self.config = config or NetworkConfig()
        self.network = MLP(
            input_dim=NUM_PLAYERS * FEATURES_PER_PLAYER,
            output_dim=NUM_PLAYERS,
            hidden_sizes=self.config.hidden_sizes,
            activation=self.config.activation,
            init_type=self.config.init_type,
            gain=self.config.gain,
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through the network.

        Args:
            x: Encoded states, shape (batch, num_players, FEATURES_PER_PLAYER)

        Returns:
            Logits, shape (batch, num_players)
        """
        return self.network(x.flatten(start_dim=1))


class NetworkValueFunction(ValueFunction):
    """
    Value function backed by a ValueNetwork.

    The network's logits are turned into win shares with a softmax, so the
    returned values are positive and sum to one.
    """

    def __init__(self, network: Optional[ValueNetwork] = None, config: Optional[NetworkConfig] = None):
        """
        Initialize the value function.

        Args:
            network: Trained network (a freshly initialized one if None)
            config: Network configuration, used when `network` is None
        """
        self.network = network or ValueNetwork(config)
        self.device = torch.device(self.network.config.device)
        self.network.to(self.device)
        self.network.eval()

    @classmethod
    def from_checkpoint(
        cls,
        path: Union[str, Path],
        config: Optional[NetworkConfig] = None
    ) -> 'NetworkValueFunction':
        """
        Load a value function from a saved state dict.

        Args:
            path: Path of a file written by `save`
            config: Configuration matching the saved network

        Returns:
            NetworkValueFunction with the loaded weights
        """
        network = ValueNetwork(config)
        state_dict = torch.load(path, map_location=network.config.device)
        network.load_state_dict(state_dict)
        logger.info(f"Loaded value network from {path}")
        return cls(network)

    def save(self, path: Union[str, Path]) -> None:
        """Save the network weights as a state dict."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        torch.save(self.network.state_dict(), path)

    def get_in_progress_value(self, state: GameState) -> List[float]:
        features = torch.from_numpy(encode_state(state)).unsqueeze(0).to(self.device)
        with torch.no_grad():
            shares = torch.softmax(self.network(features), dim=-1)
        return shares.squeeze(0).cpu().tolist()


def set_seed(seed: int) -> None:
    """
    Set random seed for reproducibility.

    Args:
        seed: Random seed
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
