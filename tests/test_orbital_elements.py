"""
Test suite for the OrbitalElements class.

Tests include:
1. Construction from arrays and named parameters
2. Validation (strict and warning modes)
3. Derived orbital quantities
4. Equality, hashing and batch exports
"""

import pytest
import numpy as np
import pandas as pd
from orrery import OrbitalElements, OE, temp_config


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def orbit():
    """A typical derived planet orbit."""
    return OrbitalElements(
        semi_major_axis=22.5e9,
        eccentricity=0.01,
        inclination_deg=2.0,
        ascending_node_deg=45.0,
        argument_of_periapsis_deg=10.0,
        initial_mean_anomaly_deg=80.0,
        orbital_period_hours=1500.0,
    )


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Creating element sets."""

    def test_named_parameters(self, orbit):
        assert orbit.semi_major_axis == 22.5e9
        assert orbit.eccentricity == 0.01
        assert orbit.inclination_deg == 2.0
        assert orbit.ascending_node_deg == 45.0
        assert orbit.rotation_deg == 45.0
        assert orbit.argument_of_periapsis_deg == 10.0
        assert orbit.initial_mean_anomaly_deg == 80.0
        assert orbit.orbital_period_hours == 1500.0

    def test_array(self, orbit):
        same = OE(orbit.as_array())
        assert same == orbit

    def test_argument_of_periapsis_defaults_to_zero(self):
        oe = OE(semi_major_axis=1.0, eccentricity=0.0, inclination_deg=0.0,
                ascending_node_deg=0.0, initial_mean_anomaly_deg=0.0,
                orbital_period_hours=1.0)
        assert oe.argument_of_periapsis_deg == 0.0

    def test_missing_parameter(self):
        with pytest.raises(ValueError, match="Required"):
            OE(semi_major_axis=1.0, eccentricity=0.0)

    def test_unknown_parameter(self, orbit):
        params = orbit.to_dict()
        params["raan"] = 1.0
        with pytest.raises(ValueError, match="Unknown"):
            OE(**params)

    def test_array_and_parameters_conflict(self, orbit):
        with pytest.raises(ValueError):
            OE(orbit.as_array(), eccentricity=0.1)

    def test_nothing_given(self):
        with pytest.raises(ValueError):
            OE()

    def test_wrong_length(self):
        with pytest.raises(ValueError, match="7-element"):
            OE([1.0, 0.0, 0.0])

    def test_immutable(self, orbit):
        with pytest.raises(ValueError):
            orbit.elements[0] = 1.0

    def test_as_array_is_a_copy(self, orbit):
        values = orbit.as_array()
        values[0] = 1.0
        assert orbit.semi_major_axis == 22.5e9

    def test_replace(self, orbit):
        changed = orbit.replace(eccentricity=0.2)
        assert changed.eccentricity == 0.2
        assert orbit.eccentricity == 0.01
        with pytest.raises(ValueError):
            orbit.replace(bogus=1.0)

    def test_from_numpy(self, orbit):
        rows = np.vstack([orbit.as_array(), orbit.as_array()])
        orbits = OrbitalElements.from_numpy(rows)
        assert orbits == [orbit, orbit]
        with pytest.raises(ValueError):
            OrbitalElements.from_numpy(np.zeros(7))


class TestValidation:
    """Closed, finite orbits only."""

    @pytest.mark.parametrize("field,value", [
        ("semi_major_axis", 0.0),
        ("semi_major_axis", -1.0),
        ("eccentricity", -0.1),
        ("eccentricity", 1.0),
        ("orbital_period_hours", 0.0),
        ("inclination_deg", 200.0),
        ("ascending_node_deg", np.nan),
    ])
    def test_strict_rejects(self, orbit, field, value):
        with pytest.raises(ValueError):
            orbit.replace(**{field: value})

    def test_lenient_mode_warns(self, orbit):
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning):
                bad = orbit.replace(eccentricity=1.5)
        assert bad.eccentricity == 1.5

    def test_validate_false_skips_checks(self):
        oe = OE([-1.0, 2.0, 0.0, 0.0, 0.0, 0.0, -1.0], validate=False)
        assert oe.semi_major_axis == -1.0


class TestDerivedQuantities:
    """Quantities computed from the elements."""

    def test_radian_accessors(self, orbit):
        assert orbit.inclination == pytest.approx(np.radians(2.0))
        assert orbit.ascending_node == pytest.approx(np.pi / 4)
        assert orbit.argument_of_periapsis == pytest.approx(np.radians(10.0))
        assert orbit.initial_mean_anomaly == pytest.approx(np.radians(80.0))

    def test_mean_motion(self, orbit):
        assert orbit.mean_motion() == pytest.approx(2*np.pi / 1500.0)

    def test_mean_anomaly_wraps(self, orbit):
        one_period_later = orbit.mean_anomaly_at(1500.0)
        assert one_period_later == pytest.approx(orbit.initial_mean_anomaly)
        assert 0.0 <= orbit.mean_anomaly_at(-1e6) < 2*np.pi

    def test_axes(self, orbit):
        assert orbit.periapsis == pytest.approx(22.5e9 * 0.99)
        assert orbit.apoapsis == pytest.approx(22.5e9 * 1.01)
        assert orbit.semi_minor_axis == pytest.approx(22.5e9 * np.sqrt(1 - 0.01**2))


class TestSpecialMethods:
    """Equality, hashing, sequence protocol and printing."""

    def test_equality_within_tolerance(self, orbit):
        nudged = OE(orbit.as_array() + np.array([1e-12, 0, 0, 0, 0, 0, 0]))
        assert nudged == orbit

    def test_inequality(self, orbit):
        assert orbit != orbit.replace(eccentricity=0.02)
        assert orbit != "orbit"

    def test_hash_consistent(self, orbit):
        assert hash(orbit) == hash(orbit.copy())
        assert len({orbit, orbit.copy()}) == 1

    def test_sequence_protocol(self, orbit):
        assert len(orbit) == 7
        assert orbit[0] == 22.5e9
        assert list(orbit)[-1] == 1500.0

    def test_str(self, orbit):
        text = str(orbit)
        assert "Orbital Elements" in text
        assert "1500.0000 h" in text

    def test_repr_round_trip(self, orbit):
        assert "OrbitalElements([" in repr(orbit)


class TestBatch:
    """Batch exports."""

    def test_to_numpy(self, orbit):
        array = OE.Batch.to_numpy([orbit, orbit])
        assert array.shape == (2, 7)
        assert OE.Batch.to_numpy([]).shape == (0, 7)

    def test_field_arrays(self, orbit):
        np.testing.assert_array_equal(OE.Batch.semi_major_axis([orbit]), [22.5e9])
        np.testing.assert_array_equal(OE.Batch.orbital_period_hours([orbit]), [1500.0])

    def test_to_dataframe_from_dict(self, orbit):
        df = OE.Batch.to_dataframe({"Crusader": orbit})
        assert list(df.columns) == ['a', 'e', 'i', 'RAAN', 'w', 'M0', 'period_h']
        assert df.index.name == 'name'
        assert df.loc["Crusader", "RAAN"] == 45.0

    def test_to_dataframe_index_mismatch(self, orbit):
        with pytest.raises(ValueError):
            OE.Batch.to_dataframe([orbit], index=["a", "b"])

    def test_to_dataframe_empty(self):
        df = OE.Batch.to_dataframe([])
        assert isinstance(df, pd.DataFrame)
        assert df.empty

    def test_from_dataframe(self, orbit):
        df = OE.Batch.to_dataframe({"Crusader": orbit})
        restored = OrbitalElements.from_dataframe(df)
        assert restored["Crusader"] == orbit
