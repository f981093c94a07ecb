"""Temperature ladders and replica exchange for parallel tempering."""

from __future__ import annotations

import enum
import math
import operator
from collections.abc import Sequence
from itertools import accumulate, repeat
from typing import Any

import numpy as np


class LadderMode(enum.IntEnum):
    """How the intermediate rungs of the temperature ladder are spaced."""

    LINEAR_TEMPERATURE = 0
    LINEAR_BETA = 1
    EXPONENTIAL_TEMPERATURE = 2


class TemperingController:
    """Holds a temperature ladder and decides swaps between neighbouring rungs.

    ``replica_ids[t]`` is the replica holding temperature ``t``;
    ``temperature_ids[r]`` is the temperature held by replica ``r``.
    Temperatures are kept in increasing order, betas in decreasing order.
    """

    def __init__(
        self,
        num_replicas: int,
        t_max: float,
        t_min: float,
        ladder_mode: int | LadderMode = LadderMode.EXPONENTIAL_TEMPERATURE,
        iterations_per_round: int = 0,
        rng: Any = None,
    ) -> None:
        if num_replicas < 1:
            raise ValueError("a temperature ladder needs at least one replica")
        try:
            self.ladder_mode = LadderMode(ladder_mode)
        except ValueError:
            raise ValueError("Requested Ladder Init Mode does not exist!") from None

        self.num_replicas = num_replicas
        self.t_max = float(t_max)
        self.t_min = float(t_min)
        self.iterations_per_round = int(iterations_per_round)
        self.scaled_iterations = [self.iterations_per_round] * num_replicas
        self.rng = rng if rng is not None else np.random.default_rng()
        self.replica_ids = list(range(num_replicas))
        self.temperature_ids = list(range(num_replicas))
        self.temperatures, self.betas = self._build_ladder()

    def _build_ladder(self) -> tuple[np.ndarray, np.ndarray]:
        n = self.num_replicas
        one = np.float32(1.0)
        t_min = np.float32(self.t_min)
        t_max = np.float32(self.t_max)
        temperatures = np.zeros(n, dtype=np.float32)
        betas = np.zeros(n, dtype=np.float32)
        inner = max(n - 2, 0)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            temperatures[0] = t_min
            temperatures[-1] = t_max
            betas[0] = one / t_min
            betas[-1] = one / t_max
            steps = np.float32(n - 1)

            if self.ladder_mode is LadderMode.LINEAR_TEMPERATURE:
                step = (t_max - t_min) / steps
                rungs = list(accumulate(repeat(step, inner), operator.add, initial=t_min))[1:]
                temperatures[1:1 + inner] = rungs
                betas[1:1 + inner] = one / temperatures[1:1 + inner]
            elif self.ladder_mode is LadderMode.LINEAR_BETA:
                step = (betas[0] - betas[-1]) / steps
                rungs = list(accumulate(repeat(step, inner), operator.sub, initial=betas[0]))[1:]
                betas[1:1 + inner] = rungs
                temperatures[1:1 + inner] = one / betas[1:1 + inner]
            else:
                step = np.float32(math.pow(float(t_max / t_min), float(one / steps)))
                rungs = list(accumulate(repeat(step, inner), operator.mul, initial=t_min))[1:]
                temperatures[1:1 + inner] = rungs
                betas[1:1 + inner] = one / temperatures[1:1 + inner]

        return temperatures, betas

    def replica_temperature(self, replica_id: int) -> float:
        """Temperature currently held by ``replica_id``."""
        return float(self.temperatures[self.temperature_ids[replica_id]])

    def temperature_id(self, replica_id: int) -> int:
        """Index of the temperature currently held by ``replica_id``."""
        return self.temperature_ids[replica_id]

    def replica_iterations(self, replica_id: int) -> int:
        """Load-balanced number of iterations for ``replica_id`` this round."""
        return self.scaled_iterations[self.temperature_ids[replica_id]]

    def check_swap(self, energy1: float, energy2: float, beta1: float, beta2: float) -> bool:
        """Metropolis criterion for exchanging two neighbouring temperatures."""
        exponent = (float(beta1) - float(beta2)) * (float(energy1) - float(energy2))
        if exponent >= 0.0:
            return True
        return math.exp(exponent) > self.rng.random()

    def sync(self, energies: Sequence[float], round_times: Sequence[float]) -> None:
        """Rebalance iteration counts, then attempt temperature exchanges."""
        self.update_load_balance(round_times)
        self.exchange_temperatures(energies)

    def exchange_temperatures(self, energies: Sequence[float]) -> None:
        """Sweep up the ladder, swapping neighbouring replicas when accepted."""
        for rung in range(self.num_replicas - 1):
            low, high = self.replica_ids[rung], self.replica_ids[rung + 1]
            if self.check_swap(energies[low], energies[high], self.betas[rung], self.betas[rung + 1]):
                self.replica_ids[rung], self.replica_ids[rung + 1] = high, low
                self.temperature_ids[high] = rung
                self.temperature_ids[low] = rung + 1

    def update_load_balance(self, round_times: Sequence[float]) -> None:
        """Scale each rung's iterations so all replicas take about as long as the fastest.

        ``round_times`` are indexed by replica; iteration counts by temperature.
        """
        times = np.asarray(round_times, dtype=np.float64)[self.replica_ids]
        scaled = np.asarray(self.scaled_iterations, dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            per_iteration = times / scaled
            ratio = per_iteration.min() / per_iteration
        ratio = np.where(np.isnan(ratio), 1.0, ratio)
        self.scaled_iterations = [int(value) for value in ratio * self.iterations_per_round]