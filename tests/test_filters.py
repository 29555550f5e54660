import pytest

from quadarm.filters import (
    Bezier1D,
    LowPassFilter,
    RampTrajectory,
    factorial,
    nchoosek,
)


def test_low_pass_first_sample_passes_through():
    lpf = LowPassFilter(5.0, 0.01)
    assert lpf.filter(3.25) == 3.25


def test_low_pass_output_lies_between_previous_and_input():
    lpf = LowPassFilter(5.0, 0.01)
    lpf.filter(0.0)
    out = lpf.filter(10.0)
    assert 0.0 < out < 10.0


def test_low_pass_converges_to_constant_input():
    lpf = LowPassFilter(10.0, 0.01)
    lpf.filter(0.0)
    out = 0.0
    for _ in range(500):
        out = lpf.filter(2.0)
    assert out == pytest.approx(2.0, abs=1e-6)


def test_low_pass_without_params_holds_first_value():
    lpf = LowPassFilter()
    first = lpf.filter(1.5)
    assert [lpf.filter(v) for v in (4.0, -2.0, 9.0)] == [first, first, first]


def test_low_pass_higher_cutoff_responds_faster():
    slow = LowPassFilter(1.0, 0.01)
    fast = LowPassFilter(20.0, 0.01)
    slow.filter(0.0)
    fast.filter(0.0)
    assert fast.filter(1.0) > slow.filter(1.0)


def test_low_pass_set_params_changes_alpha():
    lpf = LowPassFilter(1.0, 0.01)
    before = lpf.alpha
    lpf.set_params(50.0, 0.01)
    assert lpf.alpha > before


def test_low_pass_requires_both_params():
    with pytest.raises(ValueError):
        LowPassFilter(1.0)


def test_ramp_reaches_target_and_is_monotonic():
    ramp = RampTrajectory(0.01)
    ramp.set_target(1.0, 1.0)
    values = [ramp.step() for _ in range(150)]
    assert values == sorted(values)
    assert values[-1] == 1.0
    assert ramp.reached()


def test_ramp_tiny_time_snaps_in_one_step():
    ramp = RampTrajectory(0.01)
    ramp.set_target(1.0, 0.0)
    assert ramp.step() == 1.0


def test_ramp_step_target_moves_by_delta():
    ramp = RampTrajectory(0.01)
    ramp.set_target_step(10.0, 0.25)
    first = ramp.step()
    second = ramp.step()
    assert first == pytest.approx(0.25)
    assert second - first == pytest.approx(0.25)
    assert not ramp.reached()


def test_ramp_reset_holds_output_without_slope():
    ramp = RampTrajectory(0.01)
    ramp.reset(0.5)
    assert ramp.y == 0.5
    assert ramp.step() == 0.5


def test_ramp_descends_towards_lower_target():
    ramp = RampTrajectory(0.1)
    ramp.reset(3.0)
    ramp.set_target(-1.0, 2.0)
    values = [ramp.step() for _ in range(30)]
    assert values == sorted(values, reverse=True)
    assert values[-1] == -1.0


def test_factorial_values():
    assert factorial(5) == 120.0
    assert factorial(0) == 1.0
    assert factorial(-3) == factorial(0)


def test_nchoosek_symmetry_and_pascal():
    assert nchoosek(6, 2) == nchoosek(6, 4)
    for n in range(2, 9):
        for k in range(1, n):
            assert nchoosek(n, k) == nchoosek(n - 1, k - 1) + nchoosek(n - 1, k)


def test_bezier_endpoints():
    curve = Bezier1D([2.0, -1.0, 4.0, 7.5])
    assert curve.evaluate(0.0) == pytest.approx(2.0)
    assert curve.evaluate(1.0) == pytest.approx(7.5)


def test_bezier_constant_points_give_constant_curve():
    curve = Bezier1D([3.0, 3.0, 3.0, 3.0])
    for s in (0.0, 0.2, 0.5, 0.9, 1.0):
        assert curve.evaluate(s) == pytest.approx(3.0)


def test_bezier_stays_within_control_point_hull():
    points = [0.0, 5.0, -2.0, 1.0]
    curve = Bezier1D(points)
    for step in range(11):
        value = curve.evaluate(step / 10)
        assert min(points) <= value <= max(points)


def test_bezier_empty_is_zero():
    assert Bezier1D().evaluate(0.3) == 0.0