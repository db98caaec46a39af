"""
Test suite for the Kepler solver and two-body relations.

Tests cover:
- Kepler's equation residual over the eccentricity range
- Anomaly conversions and their inverses
- Perifocal geometry and frame rotation
- Kepler's third law and its inverse
- Non-convergence reporting
"""

import warnings

import pytest
import numpy as np
from orrery import temp_config, KeplerConvergenceWarning
from orrery import kepler


class TestKeplersEquation:
    """Newton-Raphson solution of M = E - e sin E."""

    @pytest.mark.parametrize("e", [0.0, 0.01, 0.1, 0.3, 0.5, 0.7, 0.8, 0.85, 0.9, 0.95])
    @pytest.mark.parametrize("M", np.linspace(0.0, 2*np.pi, 17, endpoint=False))
    def test_residual(self, e, M):
        """Residual of Kepler's equation is below 1e-9."""
        E = kepler.solve_keplers_equation(M, e)
        assert abs(E - e*np.sin(E) - M) < 1e-9

    def test_circular_orbit_returns_mean_anomaly(self):
        assert kepler.solve_keplers_equation(1.234, 0.0) == pytest.approx(1.234, abs=1e-12)

    @pytest.mark.parametrize("M", [-3.0, 7.5, 100.0, -1000.25])
    def test_mean_anomaly_is_wrapped(self, M):
        """Any real M gives the same E as its wrapped value in [0, 2pi)."""
        e = 0.3
        E = kepler.solve_keplers_equation(M, e)
        assert 0.0 <= E < 2*np.pi + 1e-9
        assert E - e*np.sin(E) == pytest.approx(np.mod(M, 2*np.pi), abs=1e-9)

    def test_cap_warns_and_returns_estimate(self):
        """Hitting the iteration cap warns but still returns a float."""
        with temp_config(KEPLER_MAX_ITER=1, KEPLER_TOLERANCE=1e-15):
            with pytest.warns(KeplerConvergenceWarning):
                E = kepler.solve_keplers_equation(2.0, 0.9)
        assert np.isfinite(E)

    def test_no_warning_when_converged(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            kepler.solve_keplers_equation(2.0, 0.5)


class TestAnomalies:
    """Eccentric, true and mean anomaly conversions."""

    @pytest.mark.parametrize("E", [0.0, 0.5, 1.5, np.pi, 4.0, 6.0])
    def test_true_equals_eccentric_when_circular(self, E):
        assert kepler.true_anomaly_from_eccentric(E, 0.0) == pytest.approx(E, abs=1e-12)

    @pytest.mark.parametrize("e", [0.01, 0.2, 0.6, 0.9])
    @pytest.mark.parametrize("E", [0.1, 1.0, 2.5, 3.5, 5.0, 6.2])
    def test_true_anomaly_round_trip(self, e, E):
        nu = kepler.true_anomaly_from_eccentric(E, e)
        E_back = kepler.eccentric_from_true_anomaly(nu, e)
        # equal modulo 2pi
        assert np.cos(E_back) == pytest.approx(np.cos(E), abs=1e-10)
        assert np.sin(E_back) == pytest.approx(np.sin(E), abs=1e-10)

    @pytest.mark.parametrize("E", [0.5, 2.0, 4.0])
    def test_true_anomaly_same_half_as_eccentric(self, E):
        """nu and E lie in the same half of the orbit."""
        nu = kepler.true_anomaly_from_eccentric(E, 0.5)
        assert np.sign(np.sin(nu)) == np.sign(np.sin(E))

    def test_mean_from_eccentric_inverts_solver(self):
        e = 0.4
        for M in np.linspace(0.1, 6.0, 12):
            E = kepler.solve_keplers_equation(M, e)
            assert kepler.mean_from_eccentric(E, e) == pytest.approx(M, abs=1e-9)

    def test_radius_from_eccentric(self):
        assert kepler.radius_from_eccentric(10.0, 0.5, 0.0) == pytest.approx(5.0)
        assert kepler.radius_from_eccentric(10.0, 0.5, np.pi) == pytest.approx(15.0)


class TestGeometry:
    """Perifocal coordinates and the fused rotation."""

    def test_periapsis_on_x_axis(self):
        x, y = kepler.orbital_plane_to_cartesian(100.0, 0.2, 0.0)
        assert x == pytest.approx(80.0)
        assert y == pytest.approx(0.0, abs=1e-12)

    def test_radius_matches_conic(self):
        a, e, nu = 50.0, 0.3, 1.1
        x, y = kepler.orbital_plane_to_cartesian(a, e, nu)
        assert np.hypot(x, y) == pytest.approx(a*(1 - e**2)/(1 + e*np.cos(nu)))

    def test_identity_rotation(self):
        assert kepler.rotate_to_reference_frame(3.0, 4.0, 0.0, 0.0, 0.0) == \
            pytest.approx((3.0, 4.0, 0.0))

    @pytest.mark.parametrize("i,O,w", [(0.3, 1.2, 2.1), (1.0, -0.5, 0.7), (np.pi/2, 0.0, 0.0)])
    def test_matches_rotation_matrices(self, i, O, w):
        """Fused formula equals R3(O) R1(i) R3(w) applied to (x, y, 0)."""
        def R3(t):
            return np.array([[np.cos(t), -np.sin(t), 0],
                             [np.sin(t), np.cos(t), 0],
                             [0, 0, 1]])

        def R1(t):
            return np.array([[1, 0, 0],
                             [0, np.cos(t), -np.sin(t)],
                             [0, np.sin(t), np.cos(t)]])

        expected = R3(O) @ R1(i) @ R3(w) @ np.array([2.0, -1.5, 0.0])
        result = kepler.rotate_to_reference_frame(2.0, -1.5, i, O, w)
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_rotation_preserves_length(self):
        result = kepler.rotate_to_reference_frame(3.0, 4.0, 0.7, 2.0, 5.0)
        assert np.linalg.norm(result) == pytest.approx(5.0)


class TestThirdLaw:
    """Period and semi-major axis from Kepler's third law."""

    @pytest.mark.parametrize("a", [1e6, 1e8, 1e10, 1e12])
    @pytest.mark.parametrize("mass", [1e20, 1e24, 1e27, 1e31])
    def test_inverse(self, a, mass):
        T = kepler.orbital_period(a, mass)
        assert kepler.semi_major_axis_from_period(T, mass) == pytest.approx(a, rel=1e-9)

    def test_earth_like_orbit(self):
        """One AU around one solar mass is about one year."""
        T = kepler.orbital_period(1.495978707e11, 1.989e30)
        assert T / 86400 == pytest.approx(365.25, rel=1e-2)

    def test_mass_from_diameter(self):
        mass = kepler.mass_from_diameter(2.0, 1000.0)
        assert mass == pytest.approx(1000.0 * 4.0 / 3.0 * np.pi)
