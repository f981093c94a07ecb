import numpy as np
import pytest

from medoidtemper.ladder import LadderMode, TemperingController


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def make(mode, n=6, t_max=10.0, t_min=0.5, iterations=100, rng=None):
    return TemperingController(n, t_max, t_min, mode, iterations, rng or FixedRng(0.5))


def test_mode_values_follow_controller_switch():
    assert LadderMode(0) is LadderMode.LINEAR_TEMPERATURE
    assert LadderMode(1) is LadderMode.LINEAR_BETA
    assert LadderMode(2) is LadderMode.EXPONENTIAL_TEMPERATURE


def test_linear_temperature_ladder():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE)
    temps = ctrl.temperatures
    assert temps[0] == pytest.approx(0.5)
    assert temps[-1] == pytest.approx(10.0)
    diffs = np.diff(temps)
    assert np.allclose(diffs, diffs[0], rtol=1e-4)
    assert np.allclose(ctrl.betas, 1.0 / temps, rtol=1e-5)


def test_linear_beta_ladder():
    ctrl = make(LadderMode.LINEAR_BETA)
    diffs = np.diff(ctrl.betas)
    assert np.all(diffs < 0)
    assert np.allclose(diffs, diffs[0], rtol=1e-4)
    assert np.allclose(ctrl.temperatures, 1.0 / ctrl.betas, rtol=1e-5)


def test_exponential_ladder():
    ctrl = make(LadderMode.EXPONENTIAL_TEMPERATURE)
    ratios = ctrl.temperatures[1:] / ctrl.temperatures[:-1]
    assert np.allclose(ratios, ratios[0], rtol=1e-4)
    assert ctrl.temperatures[-1] == pytest.approx(10.0)


def test_invalid_mode_raises():
    with pytest.raises(ValueError):
        TemperingController(4, 10.0, 1.0, 7, 10, FixedRng(0.5))


def test_no_replicas_raises():
    with pytest.raises(ValueError):
        TemperingController(0, 10.0, 1.0, 0, 10, FixedRng(0.5))


def test_initial_identity_assignment():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE, iterations=40)
    for replica in range(ctrl.num_replicas):
        assert ctrl.temperature_id(replica) == replica
        assert ctrl.replica_temperature(replica) == pytest.approx(float(ctrl.temperatures[replica]))
        assert ctrl.replica_iterations(replica) == 40


def test_check_swap_favourable_always_accepts():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE, rng=FixedRng(0.999))
    assert ctrl.check_swap(5.0, 1.0, 2.0, 1.0) is True


def test_check_swap_unfavourable_rejects():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE, rng=FixedRng(0.5))
    assert ctrl.check_swap(0.0, 100.0, 10.0, 0.1) is False


def test_exchange_moves_high_energy_replica_up():
    ctrl = TemperingController(2, 10.0, 0.1, LadderMode.LINEAR_TEMPERATURE, 10, FixedRng(0.5))
    ctrl.exchange_temperatures([10.0, 0.0])
    assert ctrl.replica_temperature(0) == pytest.approx(float(ctrl.temperatures[1]))
    assert ctrl.replica_temperature(1) == pytest.approx(float(ctrl.temperatures[0]))


def test_exchange_keeps_low_energy_replica_cold():
    ctrl = TemperingController(2, 10.0, 0.1, LadderMode.LINEAR_TEMPERATURE, 10, FixedRng(0.5))
    ctrl.exchange_temperatures([0.0, 10.0])
    assert ctrl.replica_temperature(0) == pytest.approx(float(ctrl.temperatures[0]))


def test_ids_stay_inverse_permutations():
    ctrl = make(LadderMode.EXPONENTIAL_TEMPERATURE, n=8, rng=np.random.default_rng(3))
    gen = np.random.default_rng(11)
    for _ in range(50):
        ctrl.sync(list(gen.normal(size=8)), [1.0] * 8)
        assert sorted(ctrl.replica_ids) == list(range(8))
        for rung, replica in enumerate(ctrl.replica_ids):
            assert ctrl.temperature_ids[replica] == rung


def test_equal_times_keep_iterations():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE, n=4, iterations=100)
    ctrl.update_load_balance([2.0, 2.0, 2.0, 2.0])
    assert ctrl.scaled_iterations == [100] * 4


def test_slow_replica_gets_fewer_iterations():
    ctrl = make(LadderMode.LINEAR_TEMPERATURE, n=2, iterations=100)
    ctrl.update_load_balance([1.0, 2.0])
    assert ctrl.scaled_iterations[0] == 100
    assert ctrl.scaled_iterations[1] * 2 == ctrl.scaled_iterations[0]