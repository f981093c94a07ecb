"""Parallel-tempering engine that drives many k-medoid replicas."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np

from medoidtemper.ladder import LadderMode, TemperingController
from medoidtemper.model import CardinalityModel
from medoidtemper.params import get_param
from medoidtemper.replica import CardinalityReplica
from medoidtemper.timer import Stopwatch

STAGNATION_LIMIT = 10000


def folded_temperature_ids(
    total_replicas: int,
    total_cores: int,
    cores_per_controller: int,
    replicas_per_controller: int,
) -> list[int]:
    """Temperature index visited by each work item, folding back and forth along the ladder."""
    if total_cores < 1 or cores_per_controller < 1:
        raise ValueError("core counts must be positive")
    ids = []
    for r in range(total_replicas):
        fold, position = divmod(r // total_cores, 2)[1], r % cores_per_controller
        fold_mul = (r // total_cores) // 2
        relative = fold_mul * cores_per_controller + position
        ids.append(relative if fold == 0 else replicas_per_controller - 1 - relative)
    return ids


class CardinalityEngine:
    """Runs rounds over all replicas and exchanges temperatures between them."""

    def __init__(
        self,
        model: CardinalityModel,
        round_limit: int,
        replicas_per_controller: int,
        num_controllers: int,
        cores_per_controller: int,
        t_max: float,
        t_min: float,
        ladder_mode: int | LadderMode = LadderMode.EXPONENTIAL_TEMPERATURE,
        time_limit: float = float("inf"),
        seed: Any = None,
    ) -> None:
        if replicas_per_controller < 1 or num_controllers < 1 or cores_per_controller < 1:
            raise ValueError("replica, controller and core counts must be positive")

        self.model = model
        self.iterations_per_round = model.num_vars * model.num_k
        self.round_limit = int(round_limit)
        self.time_limit = float(time_limit)
        self.replicas_per_controller = int(replicas_per_controller)
        self.num_controllers = int(num_controllers)
        self.cores_per_controller = int(cores_per_controller)
        self.total_replicas = self.replicas_per_controller * self.num_controllers
        self.total_cores = self.num_controllers * self.cores_per_controller
        self.stagnation_limit = STAGNATION_LIMIT

        self.timer = Stopwatch()
        self.current_round = 0
        self.ans_id = -1

        seeds = np.random.SeedSequence(seed).spawn(self.total_replicas + self.num_controllers)
        replica_seeds, controller_seeds = seeds[: self.total_replicas], seeds[self.total_replicas:]

        self.temperature_ids = folded_temperature_ids(
            self.total_replicas,
            self.total_cores,
            self.cores_per_controller,
            self.replicas_per_controller,
        )
        self.replica_costs = [0.0] * self.total_replicas
        self.replica_is_opt = [False] * self.total_replicas
        self.round_times = [[0.0] * self.replicas_per_controller for _ in range(self.num_controllers)]

        self.replicas = [
            CardinalityReplica(r, model, replica_seeds[r]) for r in range(self.total_replicas)
        ]
        self.controllers = [
            TemperingController(
                self.replicas_per_controller,
                t_max,
                t_min,
                ladder_mode,
                self.iterations_per_round,
                np.random.default_rng(controller_seed),
            )
            for controller_seed in controller_seeds
        ]

        self.prev_cost_min = self.cost_min()
        self.cost_min_counter = 0

    @classmethod
    def from_params(
        cls,
        model: CardinalityModel,
        params: Mapping[str, str],
        seed: Any = None,
    ) -> "CardinalityEngine":
        """Build an engine from a parameter map."""
        return cls(
            model,
            get_param(params, "round_limit", int),
            get_param(params, "num_replicas_per_controller", int),
            get_param(params, "num_controllers", int),
            get_param(params, "num_cores_per_controller", int),
            get_param(params, "T_max", float),
            get_param(params, "T_min", float),
            get_param(params, "ladder_init_mode", int),
            get_param(params, "time_limit", float),
            seed,
        )

    @property
    def run_time(self) -> float:
        """Seconds taken by the last call to solve()."""
        return self.timer.elapsed()

    def solve(self) -> bool:
        """Search until an answer is found or a limit is hit; True if an answer was found."""
        self.timer.start()
        self.ans_id = self._execute_search()
        self.timer.stop()
        return self.ans_id >= 0

    def _execute_search(self) -> int:
        self.current_round = 1
        while self.current_round < self.round_limit:
            ans = self.execute_round()
            if ans != -1:
                return ans
            if self.timer.running_elapsed() >= self.time_limit:
                break
            self.current_round += 1
        return -1

    def execute_round(self) -> int:
        """Run one round on every replica.

        Returns the id of a replica that reached the target cost, the id of the
        best replica once the best cost has stagnated, or -1 otherwise.
        """
        for r, t_id in enumerate(self.temperature_ids):
            controller_index = (r // self.total_cores) % self.num_controllers
            controller = self.controllers[controller_index]
            r_id = controller_index * self.replicas_per_controller + t_id
            replica = self.replicas[r_id]

            self.replica_is_opt[r_id] = replica.execute_round(
                controller.replica_temperature(t_id),
                controller.replica_iterations(t_id),
            )
            self.round_times[controller_index][t_id] = replica.round_time
            self.replica_costs[r_id] = float(replica.cost)

        for r, is_opt in enumerate(self.replica_is_opt):
            if is_opt:
                return r

        for controller, times in zip(self.controllers, self.round_times):
            controller.sync(self.replica_costs, times)

        current = self.cost_min()
        if current < self.prev_cost_min:
            self.prev_cost_min = current
            self.cost_min_counter = 0
        else:
            self.cost_min_counter += 1

        if self.cost_min_counter == self.stagnation_limit:
            return self.cost_min_id()
        return -1

    def cost_min(self) -> float:
        """Lowest cost found by any replica."""
        return float(self.replicas[self.cost_min_id()].cost_min)

    def cost_min_id(self) -> int:
        """Id of the first replica holding the lowest cost."""
        return min(range(self.total_replicas), key=lambda r: self.replicas[r].cost_min)

    def cost_min_state(self) -> list[int]:
        """Medoid indices of the lowest-cost state found."""
        return self.replicas[self.cost_min_id()].cost_min_state