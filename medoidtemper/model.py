"""The k-medoids problem as a binary quadratic model with a cardinality constraint."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from medoidtemper.display import show
from medoidtemper.params import get_param, read_matrix

FLOAT32_MAX = float(np.finfo(np.float32).max)


@dataclass(frozen=True)
class KValues:
    """Edge densities of a clustering: between clusters, overall and within clusters."""

    k_inter: float
    k: float
    k_intra: float


class CardinalityModel:
    """Distance matrix, linear terms and the number of medoids to choose."""

    def __init__(
        self,
        distances,
        num_k: int,
        b_scale: float = 1.0,
        d_scale: float = 1.0,
        cost_answer: float = FLOAT32_MAX,
        problem_path: str = "",
        problem_name: str = "",
    ) -> None:
        matrix = np.array(distances, dtype=np.float32)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError("the distance matrix must be square")
        if not 0 < num_k <= matrix.shape[0]:
            raise ValueError(f"num_k must be between 1 and {matrix.shape[0]}, got {num_k}")

        self.num_vars = matrix.shape[0]
        self.num_k = int(num_k)
        self.b_scale = np.float32(b_scale)
        self.d_scale = np.float32(d_scale)
        self.cost_answer = float(cost_answer)
        self.problem_path = problem_path
        self.problem_name = problem_name

        self.distances = matrix
        self.b_vector = matrix.sum(axis=1, dtype=np.float32) * self.b_scale
        self.d_matrix = (-matrix) * self.d_scale

        self.num_total_edges = 0
        self.adjacency: np.ndarray | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "CardinalityModel":
        """Build a model from a parameter map, reading ``<problem_path><problem_name>.d``."""
        num_vars = get_param(params, "num_vars", int)
        num_k = get_param(params, "num_k", int)
        b_scale = get_param(params, "B_scale_factor", float)
        d_scale = get_param(params, "D_scale_factor", float)
        problem_path = get_param(params, "problem_path", str)
        problem_name = get_param(params, "problem_name", str)
        cost_answer = get_param(params, "cost_answer", float)

        distances = read_matrix(problem_path + problem_name + ".d", num_vars, num_vars, np.float32)
        return cls(
            distances,
            num_k,
            b_scale,
            d_scale,
            cost_answer,
            problem_path,
            problem_name,
        )

    def generate_assignments(self, medoids: Sequence[int]) -> list[int]:
        """Assign each point to its nearest medoid, labelled by the medoid's position."""
        chosen = [int(m) for m in medoids[: self.num_k]]
        if len(chosen) < self.num_k:
            raise ValueError(f"expected {self.num_k} medoids, got {len(chosen)}")
        first_position = {}
        for position, medoid in enumerate(chosen):
            first_position.setdefault(medoid, position)
        nearest = np.argmin(self.distances[:, chosen], axis=1)
        return [first_position[chosen[index]] for index in nearest]

    def load_adjacency(self) -> np.ndarray:
        """Read ``<problem_path><problem_name>.adj`` and count its edges."""
        path = Path(self.problem_path + self.problem_name + ".adj")
        self.adjacency = read_matrix(path, self.num_vars, self.num_vars, np.int64)
        self.num_total_edges = int(self.adjacency.sum()) // 2
        show("num_total_edges", self.num_total_edges)
        return self.adjacency

    def k_values(self, assignments: Sequence[int], adjacency=None) -> KValues:
        """Edge densities of the clustering given by ``assignments``.

        The adjacency matrix is read from the problem files unless one is given.
        """
        if adjacency is None:
            adjacency = self.load_adjacency()
        else:
            adjacency = np.asarray(adjacency)
            self.adjacency = adjacency
            self.num_total_edges = int(adjacency.sum()) // 2

        labels = np.asarray(assignments, dtype=np.int64)
        if labels.shape != (self.num_vars,):
            raise ValueError(f"expected {self.num_vars} assignments, got {labels.size}")

        k = self.num_k
        counts = np.bincount(labels, minlength=k).astype(np.float64)
        edges = np.zeros((k, k), dtype=np.float64)

        rows, cols = np.nonzero(adjacency == 1)
        row_class, col_class = labels[rows], labels[cols]
        same = row_class == col_class
        np.add.at(edges, (row_class[same], col_class[same]), 0.5)
        upper = col_class > row_class
        np.add.at(edges, (row_class[upper], col_class[upper]), 1.0)

        n = np.float64(self.num_vars)
        with np.errstate(divide="ignore", invalid="ignore"):
            density = np.float64(self.num_total_edges) / (0.5 * n * (n - 1))

            k_intra = np.float64(0.0)
            k_inter = np.float64(0.0)
            for i in range(k):
                n_i = counts[i]
                if n_i > 1:
                    k_intra += edges[i, i] / (0.5 * n_i * (n_i - 1))
                for j in range(i + 1, k):
                    n_j = counts[j]
                    pairs = (n_i + n_j) * (n_i + n_j - 1) - n_i * (n_i - 1) - n_j * (n_j - 1)
                    k_inter += edges[i, j] / (0.5 * pairs)

            k_intra /= np.float64(k)
            k_inter /= 0.5 * np.float64(k * (k - 1))

        return KValues(float(k_inter), float(density), float(k_intra))