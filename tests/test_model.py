import numpy as np
import pytest

from medoidtemper.model import CardinalityModel, KValues
from medoidtemper.params import MissingParameterError

POSITIONS = np.array([0.0, 1.0, 2.0, 10.0, 11.0])
DISTANCES = np.abs(POSITIONS[:, None] - POSITIONS[None, :])


def test_matrices_are_scaled():
    model = CardinalityModel(DISTANCES, 2, 0.5, 2.0)
    assert np.allclose(model.b_vector, DISTANCES.sum(axis=1) * 0.5)
    assert np.allclose(model.d_matrix, -DISTANCES * 2.0)
    assert np.allclose(model.distances, DISTANCES)
    assert model.num_vars == 5


def test_non_square_matrix_rejected():
    with pytest.raises(ValueError):
        CardinalityModel(np.zeros((2, 3)), 1)


def test_assignments_pinned():
    model = CardinalityModel(DISTANCES, 2)
    assert model.generate_assignments([0, 3]) == [0, 0, 0, 1, 1]


def test_assignments_swap_with_medoid_order():
    model = CardinalityModel(DISTANCES, 2)
    forward = model.generate_assignments([1, 4])
    backward = model.generate_assignments([4, 1])
    assert [1 - label for label in forward] == backward


def test_assignments_pick_nearest_medoid():
    rng = np.random.default_rng(5)
    points = rng.normal(size=(12, 2))
    dist = np.linalg.norm(points[:, None] - points[None, :], axis=2)
    model = CardinalityModel(dist, 3)
    medoids = [2, 7, 9]
    labels = model.generate_assignments(medoids)
    for i, label in enumerate(labels):
        assert model.distances[i, medoids[label]] == pytest.approx(
            model.distances[i, medoids].min()
        )


def test_from_params_reads_matrix(tmp_path):
    np.savetxt(tmp_path / "line.d", DISTANCES)
    params = {
        "num_vars": "5",
        "num_k": "2",
        "B_scale_factor": "1.5",
        "D_scale_factor": "3",
        "problem_path": str(tmp_path) + "/",
        "problem_name": "line",
        "cost_answer": "-4.25",
    }
    model = CardinalityModel.from_params(params)
    assert model.num_k == 2
    assert model.cost_answer == pytest.approx(-4.25)
    assert np.allclose(model.distances, DISTANCES)
    assert np.allclose(model.d_matrix, -DISTANCES * 3)
    assert np.allclose(model.b_vector, DISTANCES.sum(axis=1) * 1.5)


def test_from_params_missing_parameter():
    with pytest.raises(MissingParameterError):
        CardinalityModel.from_params({"num_vars": "5"})


def test_complete_graph_densities():
    model = CardinalityModel(DISTANCES, 2)
    adjacency = np.ones((5, 5), dtype=int) - np.eye(5, dtype=int)
    values = model.k_values([0, 0, 0, 1, 1], adjacency)
    assert values == KValues(1.0, 1.0, 1.0)
    assert model.num_total_edges == 10


def test_empty_graph_densities():
    model = CardinalityModel(DISTANCES, 2)
    values = model.k_values([0, 0, 0, 1, 1], np.zeros((5, 5), dtype=int))
    assert values == KValues(0.0, 0.0, 0.0)


def test_block_graph_has_no_inter_edges():
    model = CardinalityModel(DISTANCES, 2)
    labels = np.array([0, 0, 0, 1, 1])
    adjacency = (labels[:, None] == labels[None, :]).astype(int) - np.eye(5, dtype=int)
    values = model.k_values(list(labels), adjacency)
    assert values.k_intra == pytest.approx(1.0)
    assert values.k_inter == pytest.approx(0.0)
    assert values.k == pytest.approx(model.num_total_edges / 10)


def test_adjacency_read_from_file(tmp_path):
    labels = [0, 0, 0, 1, 1]
    adjacency = np.array(
        [
            [0, 1, 0, 1, 0],
            [1, 0, 1, 0, 0],
            [0, 1, 0, 0, 1],
            [1, 0, 0, 0, 1],
            [0, 0, 1, 1, 0],
        ]
    )
    np.savetxt(tmp_path / "g.adj", adjacency, fmt="%d")
    model = CardinalityModel(DISTANCES, 2, problem_path=str(tmp_path) + "/", problem_name="g")
    from_file = model.k_values(labels)
    assert model.num_total_edges == int(adjacency.sum()) // 2
    assert np.array_equal(model.adjacency, adjacency)
    assert from_file == CardinalityModel(DISTANCES, 2).k_values(labels, adjacency)


def test_wrong_assignment_length_rejected():
    model = CardinalityModel(DISTANCES, 2)
    with pytest.raises(ValueError):
        model.k_values([0, 1], np.zeros((5, 5), dtype=int))