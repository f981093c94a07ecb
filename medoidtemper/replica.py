"""A single annealing replica searching for a set of k medoids."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from medoidtemper.model import CardinalityModel
from medoidtemper.timer import Stopwatch


@dataclass
class RoundRecord:
    """What a replica reports about its most recent round."""

    replica_id: int = -1
    stopwatch: Stopwatch = field(default_factory=Stopwatch)
    prev_round_time: float = 0.0
    prev_round_number: int = 0
    prev_round_cost: float = 0.0
    cost_min: float = 0.0

    def round_started(self) -> None:
        """Mark the start of a round."""
        self.stopwatch.start()

    def round_finished(self, cost: float, cost_min: float) -> None:
        """Record the duration and costs of the round that just ended."""
        self.prev_round_time = self.stopwatch.running_elapsed()
        self.prev_round_number += 1
        self.prev_round_cost = float(cost)
        self.cost_min = float(cost_min)


class CardinalityReplica:
    """Keeps exactly ``num_k`` nodes on and anneals by exchanging one on-node for an off-node.

    ``h_vector[i]`` caches the local field of node ``i``: its linear term plus its
    coupling to every node currently on.
    """

    def __init__(self, replica_id: int, model: CardinalityModel, rng: Any = None) -> None:
        if model.num_k >= model.num_vars:
            raise ValueError(
                f"num_k ({model.num_k}) must be smaller than num_vars ({model.num_vars}) "
                "so that an exchange is possible"
            )
        self.replica_id = replica_id
        self.model = model
        self.rng = np.random.default_rng(rng)
        self.record = RoundRecord(replica_id=replica_id)

        self.t_neg = np.float32(0.0)
        self.iterations = 0

        self.k_on: list[int] = []
        self.k_on_set: set[int] = set()
        self._k_on_min: list[int] = []

        self._choose_random_medoids()
        self._init_counters()
        self._init_fields_and_cost()

    # -- state setup -----------------------------------------------------------------

    def _choose_random_medoids(self) -> None:
        n = self.model.num_vars
        for _ in range(self.model.num_k):
            node = int(self.rng.integers(n))
            while node in self.k_on_set:
                node = int(self.rng.integers(n))
            self.k_on.append(node)
            self.k_on_set.add(node)

    def _init_counters(self) -> None:
        self.counter = 0
        self.i_on = self.k_on[0]
        self.i_off = self._next_off((self.i_on + 1) % self.model.num_vars)

    def _next_off(self, start: int) -> int:
        node = start
        while node in self.k_on_set:
            node = (node + 1) % self.model.num_vars
        return node

    def _init_fields_and_cost(self) -> None:
        d = self.model.d_matrix
        b = self.model.b_vector
        self.h_vector = d[:, self.k_on].sum(axis=1, dtype=np.float32)
        cost = np.float32(self.h_vector[self.k_on].sum(dtype=np.float32)) / np.float32(2.0)
        cost += b[self.k_on].sum(dtype=np.float32)
        self.cost = np.float32(cost)
        self.h_vector += b
        self._set_min_state()

    def _set_min_state(self) -> None:
        self.cost_min = self.cost
        self._k_on_min = list(self.k_on)

    # -- results ---------------------------------------------------------------------

    @property
    def cost_min_state(self) -> list[int]:
        """The medoids of the lowest-cost state seen so far."""
        return list(self._k_on_min)

    @property
    def round_time(self) -> float:
        """Duration of the last round in seconds."""
        return self.record.prev_round_time

    # -- search ----------------------------------------------------------------------

    def execute_round(self, temperature: float, iterations: int) -> bool:
        """Run ``iterations`` exchange trials at ``temperature``.

        Returns True once the best cost found reaches the model's target answer.
        """
        self.t_neg = np.float32(-1.0 * temperature)
        self.iterations = int(iterations)

        self.record.round_started()
        self._run_serial_exchange()
        self.record.round_finished(self.cost, self.cost_min)

        return float(self.cost_min) <= self.model.cost_answer

    def delta_exchange(self, i_on: int, i_off: int) -> np.float32:
        """Change in cost from turning ``i_on`` off and ``i_off`` on."""
        return np.float32(
            self.h_vector[i_off] - self.h_vector[i_on] - self.model.d_matrix[i_on, i_off]
        )

    def _accepts(self, delta: np.float32) -> bool:
        u = self.rng.random()
        if u == 0.0:
            return float(self.t_neg) < 0.0
        return float(self.t_neg) * math.log(u) > float(delta)

    def _advance_on(self) -> None:
        self.counter = (self.counter + 1) % self.model.num_k
        self.i_on = self.k_on[self.counter]
        self.i_off = self.i_on

    def _run_serial_exchange(self) -> None:
        d = self.model.d_matrix
        n = self.model.num_vars
        for _ in range(self.iterations):
            delta = self.delta_exchange(self.i_on, self.i_off)
            if self._accepts(delta):
                self.cost = np.float32(self.cost + delta)
                self.h_vector += d[self.i_off] - d[self.i_on]
                self.k_on_set.add(self.i_off)
                self.k_on_set.discard(self.i_on)
                self.k_on[self.counter] = self.i_off
                if self.cost < self.cost_min:
                    self._set_min_state()
                self._advance_on()
            elif self.i_off == self.i_on - 1:
                self._advance_on()
            self.i_off = self._next_off((self.i_off + 1) % n)