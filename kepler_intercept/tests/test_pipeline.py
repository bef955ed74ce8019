import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from kepler_intercept import Orbit, anomaly, conic
from kepler_intercept.config import make_intercept_config
from kepler_intercept.pipeline import find_intercepts, intercept_orbit
from kepler_intercept.ranges import intersect_orbit_ranges
from kepler_intercept.search import intercept_search
from kepler_intercept.times import intercept_times


def _circle(i=0.0):
    return Orbit.from_elements(1.0, 1.0, 0.0, i, 0.0, 0.0, 0.0)


@pytest.mark.parametrize("e2", [0.0, 0.5, 1.0, 1.5])
def test_crossing_orbits(e2):
    """orbit2 passes through the point of orbit1 at E1 = 1, tilted by 0.5 rad."""
    mu = 1.0
    orbit1 = Orbit.from_elements(mu, 1.0, 0.2, 0.3, 0.4, 0.5, 0.0)
    E1 = 1.0
    t = float(anomaly.eccentric_to_mean(orbit1.eccentricity, E1)) / orbit1.mean_motion
    pos1 = orbit1.position_eccentric(E1)

    r1 = np.linalg.norm(pos1)
    radial = pos1 / r1
    horizontal = np.cross(orbit1.normal_axis, radial)
    f2, rel_incl = 0.7, 0.5
    p2 = r1 * (1.0 + e2 * math.cos(f2))
    vr = math.sqrt(mu / p2) * e2 * math.sin(f2)
    vh = math.sqrt(mu / p2) * (1.0 + e2 * math.cos(f2))
    vel2 = vr * radial + vh * (math.cos(rel_incl) * horizontal + math.sin(rel_incl) * orbit1.normal_axis)
    orbit2 = Orbit.from_state(mu, pos1, vel2, epoch=t)

    threshold = (orbit1.p + orbit2.p) / 1000.0
    window = 0.3 * orbit1.period
    intercepts = intercept_orbit(orbit1, orbit2, t - window, t + window, threshold)
    assert len(intercepts) >= 1

    times = [i.time for i in intercepts]
    assert times == sorted(times)

    intercept = min(intercepts, key=lambda i: abs(i.time - t))
    assert intercept.distance <= threshold
    assert np.linalg.norm(intercept.positions[0] - pos1) < threshold
    assert np.linalg.norm(intercept.positions[1] - pos1) < threshold
    assert np.linalg.norm(intercept.velocities[1] - vel2) < 1e-3
    assert intercept.E1 == pytest.approx(E1, abs=1e-3)


def test_polar_and_equatorial_every_half_period():
    intercepts = intercept_orbit(_circle(), _circle(0.5 * math.pi), -1.0, 7.0, 0.01)
    assert len(intercepts) == 3
    assert_allclose([i.time for i in intercepts], [0.0, math.pi, 2.0 * math.pi], atol=1e-6)
    for intercept in intercepts:
        assert intercept.distance < 0.01


def test_max_intercepts():
    intercepts = intercept_orbit(_circle(), _circle(0.5 * math.pi), -1.0, 7.0, 0.01, max_intercepts=2)
    assert len(intercepts) == 2
    assert_allclose([i.time for i in intercepts], [0.0, math.pi], atol=1e-6)


def test_retrograde_circles_report_first_approach():
    # full ranges merge into a single time interval, which gives a single intercept
    intercepts = intercept_orbit(_circle(), _circle(math.pi), -1.0, 7.0, 0.01)
    assert len(intercepts) == 1
    assert intercepts[0].time == pytest.approx(0.0, abs=1e-4)


def test_orbits_too_far_apart():
    inner = Orbit.from_elements(1.0, 40.0 / 3.0, 1.0 / 3.0)
    outer = Orbit.from_elements(1.0, 400.0 / 3.0, 1.0 / 3.0)
    assert intercept_orbit(inner, outer, 0.0, 1e4, 1.0) == []


def test_radial_orbit():
    radial = Orbit.from_state(1.0, [1.0, 0.0, 0.0], [0.3, 0.0, 0.0])
    assert intercept_orbit(radial, _circle(), 0.0, 10.0, 0.1) == []


def test_empty_window():
    assert intercept_orbit(_circle(), _circle(0.5 * math.pi), 1.0, 1.0, 0.01) == []


def test_find_intercepts_uses_config():
    equatorial, polar = _circle(), _circle(0.5 * math.pi)
    config = make_intercept_config(0.01, max_intercepts=2)
    expected = intercept_orbit(equatorial, polar, -1.0, 7.0, 0.01, max_intercepts=2)
    found = find_intercepts(equatorial, polar, -1.0, 7.0, config)
    assert [i.time for i in found] == [i.time for i in expected]



def test_coincident_circles():
    orbit = Orbit.from_elements(1.0, 2.0, 0.0, 0.3, 0.4, 0.5, 1.0)
    twin = Orbit.from_elements(1.0, 2.0, 0.0, 0.3, 0.4, 0.5, 1.0)
    intercepts = intercept_orbit(orbit, twin, 0.0, 10.0, 0.01)
    assert len(intercepts) == 1
    assert intercepts[0].distance == 0.0
    assert intercepts[0].speed == 0.0
    assert intercepts[0].time == 0.0


def test_numpy_scalar_parameters():
    equatorial, polar = _circle(), _circle(0.5 * math.pi)
    expected = intercept_orbit(equatorial, polar, -0.5, 0.5, 0.01, target_distance=0.1)
    intercepts = intercept_orbit(equatorial, polar, np.float64(-0.5), np.float64(0.5), np.float64(0.01),
                                 target_distance=np.float64(0.1))
    assert len(intercepts) == 1
    assert intercepts[0].time == expected[0].time
    assert abs(intercepts[0].distance - 0.1) <= 0.01


@pytest.mark.parametrize("threshold", [0.0, -0.01])
def test_threshold_must_be_positive(threshold):
    with pytest.raises(ValueError):
        intercept_orbit(_circle(), _circle(0.5 * math.pi), -1.0, 1.0, threshold)


def _anomaly_at(orbit, t):
    E = orbit.eccentric_anomaly_at(t)
    return float(anomaly.wrap_angle(anomaly.eccentric_to_true(orbit.eccentricity, E)))


def _max_mean_anomaly(orbit):
    if orbit.closed:
        return 2.0 * math.pi
    return float(anomaly.eccentric_to_mean(orbit.eccentricity, math.pi))


@pytest.mark.parametrize("seed", range(100))
def test_random_crossing_orbits(seed):
    """
    Two random orbits constructed to pass through the same point at time t,
    with any conic section, size and relative inclination.
    """
    u = np.random.default_rng(seed).random(10)

    mu = 1.0 + u[0] * 1.0e5
    p1 = 1.0 + u[1] * 1.0e5
    e1 = 2.0 * u[2]
    i = u[3] * math.pi
    an = (-1.0 + 2.0 * u[4]) * math.pi
    arg = (-1.0 + 2.0 * u[5]) * math.pi
    orbit1 = Orbit.from_elements(mu, p1, e1, i, an, arg, 0.0)
    E1 = (-1.0 + 2.0 * u[6]) * (math.pi if orbit1.closed else 0.5 * math.pi)
    t = float(anomaly.eccentric_to_mean(orbit1.eccentricity, E1)) / orbit1.mean_motion
    pos1 = orbit1.position_eccentric(E1)
    vel1 = orbit1.velocity_eccentric(E1)

    r1 = np.linalg.norm(pos1)
    radial = pos1 / r1
    horizontal = np.cross(orbit1.normal_axis, radial)
    e2 = 2.0 * u[7]
    E2 = (-1.0 + 2.0 * u[8]) * (math.pi if conic.closed(e2) else 0.5 * math.pi)
    f2 = float(anomaly.eccentric_to_true(e2, E2))
    rel_incl = (-1.0 + 2.0 * u[9]) * math.pi
    p2 = r1 * (1.0 + e2 * math.cos(f2))
    vr = math.sqrt(mu / p2) * e2 * math.sin(f2)
    vh = math.sqrt(mu / p2) * (1.0 + e2 * math.cos(f2))
    vel2 = vr * radial + vh * (math.cos(rel_incl) * horizontal + math.sin(rel_incl) * orbit1.normal_axis)
    orbit2 = Orbit.from_state(mu, pos1, vel2, epoch=t)
    assert_allclose(orbit2.get_state(t).r, pos1, rtol=0.0, atol=1e-6 * r1)

    threshold = (orbit1.p + orbit2.p) / 1000.0

    # both orbits are inside their true anomaly ranges at t
    ranges = []
    for o1, o2 in ((orbit1, orbit2), (orbit2, orbit1)):
        pair = intersect_orbit_ranges(o1, o2, threshold)
        assert pair.count in (1, 2)
        assert pair.first.begin >= (-2.0 * math.pi if o1.closed else -math.pi)
        assert pair.first.end <= math.pi
        if pair.count == 2:
            assert pair.first.end < pair.second.begin
        assert pair.contains(_anomaly_at(o1, t))
        ranges.append(pair)

    # t is inside one of the time intervals
    t0 = max(orbit1.periapsis_time - _max_mean_anomaly(orbit1) / orbit1.mean_motion,
             orbit2.periapsis_time - _max_mean_anomaly(orbit2) / orbit2.mean_motion)
    t1 = min(orbit1.periapsis_time + _max_mean_anomaly(orbit1) / orbit1.mean_motion,
             orbit2.periapsis_time + _max_mean_anomaly(orbit2) / orbit2.mean_motion)
    max_times = 8
    times = intercept_times(orbit1, orbit2, t0, t1, ranges[0], ranges[1], max_times)
    assert 1 <= len(times) <= max_times
    for interval in times:
        assert t0 <= interval.begin < interval.end <= t1
    containing = [interval for interval in times if interval.begin <= t <= interval.end]
    assert len(containing) == 1

    # searching that interval finds the intercept at t
    coplanar = abs(abs(np.dot(orbit1.normal_axis, orbit2.normal_axis)) - 1.0) < 1e-9
    begin, end = containing[0]
    found = False
    for _ in range(4):
        if found or not begin < end:
            break
        result = intercept_search(orbit1, orbit2, begin, end, threshold, max_steps=25)
        intercept = result.intercept

        assert begin <= intercept.time <= end
        assert_allclose(intercept.relative_position, intercept.positions[1] - intercept.positions[0])
        assert_allclose(intercept.relative_velocity, intercept.velocities[1] - intercept.velocities[0])
        assert intercept.distance == pytest.approx(np.linalg.norm(intercept.relative_position))

        if orbit1.circular and orbit2.circular and coplanar:
            found = True
        elif np.linalg.norm(intercept.positions[0] - pos1) < threshold and \
                np.linalg.norm(intercept.positions[1] - pos1) < threshold:
            found = True
            assert intercept.distance < threshold
            assert np.linalg.norm(intercept.velocities[0] - vel1) < 1e-3 * orbit1.periapsis_velocity
            assert np.linalg.norm(intercept.velocities[1] - vel2) < 1e-3 * orbit2.periapsis_velocity
        begin = result.consumed

    assert found, f"no intercept at t={t} in {containing[0]}"


@pytest.mark.parametrize("seed", range(50))
def test_random_sphere_of_influence_entry(seed):
    """A coplanar transfer from a low orbit crossing the sphere of influence of a moon."""
    u = np.random.default_rng(seed).random(6)

    mu = 1.0 + u[0] * 1.0e5
    mu_moon = mu * (0.001 + u[1] * 0.1)
    r_moon = 1.0 + u[2] * 1.0e5
    soi = r_moon * np.power(mu_moon / mu, 0.4)
    r0 = r_moon * (0.1 + u[3] * 0.3)

    # point on the sphere of influence, lam off the moon direction
    lam = math.radians(1.0) + u[4] * math.pi / 3.0
    r1 = math.sqrt(r_moon**2 + soi**2 - 2.0 * r_moon * soi * math.cos(lam))
    e_min = (r1 - r0) / (r1 + r0)
    e = e_min + (2.0 - e_min) * u[5]
    p = r0 * (1.0 + e)
    assert r0 < r_moon - soi < r1

    f1 = anomaly.true_anomaly_from_radius(p, e, r1)
    gamma = soi / r1 * math.sin(lam)
    t1 = float(anomaly.true_to_mean(e, f1)) / conic.mean_motion(mu, p, e)

    transfer = Orbit.from_elements(mu, p, e, 0.0, 0.0, gamma - f1, -t1)
    moon = Orbit.from_elements(mu, r_moon, 0.0)
    assert transfer.periapsis < r0 * (1.0 + 1e-9)

    t_begin = -t1
    # past apoapsis of a closed transfer, well past the crossing at t = 0 otherwise
    t_end = t_begin + (0.6 * transfer.period if transfer.closed else 3.0 * t1)

    threshold = 0.05 * soi
    intercepts = intercept_orbit(transfer, moon, t_begin, t_end, threshold,
                                 target_distance=soi, max_intercepts=2)
    assert 1 <= len(intercepts) <= 2

    v_ref = 0.5 * (transfer.periapsis_velocity + moon.periapsis_velocity)
    for intercept in intercepts:
        assert intercept.distance < soi + threshold
    entries = [i for i in intercepts
               if abs(i.distance - soi) <= threshold and (i.speed < 0.0 or abs(i.speed / v_ref) < 1e-6)]
    assert entries, f"no sphere of influence entry in {intercepts}"
