"""
Unit tests for domain models.

Tests that all domain models validate correctly and are immutable.
"""

import dataclasses
from collections import Counter
from datetime import datetime, timedelta

import numpy as np
import pytest

from domain import (
    AnalysisConfig,
    BackgroundEstimate,
    CalibrationConfig,
    Collision,
    DEFAULT_SYSTEMATIC_VARIATIONS,
    EventSelectionConfig,
    Histogram2D,
    Jet,
    JetConfig,
    ModeConfig,
    ModeStatistics,
    PidConfig,
    PseudoParticle,
    RunStatistics,
    Species,
    SystematicVariation,
    Track,
    TrackCuts,
)


class TestModeConfig:
    """Tests for ModeConfig domain model."""

    def test_default_enables_data_only(self):
        """Test that the default configuration runs the data mode."""
        assert ModeConfig().enabled_modes() == ["data"]

    def test_no_modes_enabled(self):
        """Test any_enabled with everything disabled."""
        assert not ModeConfig(do_data=False).any_enabled()

    def test_enabled_modes_strip_prefix(self):
        """Test that enabled mode names drop the do_ prefix."""
        modes = ModeConfig(do_data=False, do_qc=True, do_systematics_efficiency=True)
        assert modes.enabled_modes() == ["qc", "systematics_efficiency"]


class TestJetConfig:
    """Tests for JetConfig domain model."""

    def test_defaults(self):
        """Test reference defaults."""
        config = JetConfig()
        assert config.r_jet == 0.3
        assert config.min_jet_pt == 10.0
        assert config.background_method == "median"

    def test_non_positive_radius_fails(self):
        """Test that R <= 0 raises ValueError."""
        with pytest.raises(ValueError, match="r_jet must be positive"):
            JetConfig(r_jet=0.0)

    def test_unknown_background_method_fails(self):
        """Test that an unknown estimator name raises ValueError."""
        with pytest.raises(ValueError, match="background_method"):
            JetConfig(background_method="area_median")

    def test_background_range_inside_radius_fails(self):
        """Test that the median estimator needs room for jets inside bkg_eta_max."""
        with pytest.raises(ValueError, match="bkg_eta_max must be larger than r_jet"):
            JetConfig(r_jet=0.4, bkg_eta_max=0.4)


class TestEventSelectionConfig:
    """Tests for EventSelectionConfig domain model."""

    def test_rejection_percentage_out_of_range_fails(self):
        """Test that a percentage above 100 raises ValueError."""
        with pytest.raises(ValueError, match="rejection_percentage"):
            EventSelectionConfig(rejection_percentage=101)

    def test_negative_vertex_window_fails(self):
        """Test that z_vtx <= 0 raises ValueError."""
        with pytest.raises(ValueError, match="z_vtx must be positive"):
            EventSelectionConfig(z_vtx=-1.0)


class TestTrackCuts:
    """Tests for TrackCuts domain model."""

    def test_with_variation_overrides_four_cuts(self):
        """Test that a variation overrides only its own cuts."""
        variation = SystematicVariation("v", 3, 90, 0.15, 0.18)
        varied = TrackCuts().with_variation(variation)

        assert varied.min_its_nclusters == 3
        assert varied.min_tpc_ncrossed_rows == 90
        assert varied.max_dca_xy == 0.15
        assert varied.max_dca_z == 0.18
        assert varied.min_pt == TrackCuts().min_pt

    def test_inverted_eta_window_fails(self):
        """Test that min_eta >= max_eta raises ValueError."""
        with pytest.raises(ValueError, match="min_eta"):
            TrackCuts(min_eta=0.8, max_eta=-0.8)

    def test_track_cuts_are_immutable(self):
        """Test that TrackCuts is frozen."""
        cuts = TrackCuts()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cuts.min_pt = 1.0


class TestPidConfig:
    """Tests for PidConfig domain model."""

    def test_empty_tpc_window_fails(self):
        """Test that an empty TPC window raises ValueError."""
        with pytest.raises(ValueError, match="TPC nsigma window is empty"):
            PidConfig(min_nsigma_tpc=3.0, max_nsigma_tpc=-3.0)


class TestCalibrationConfig:
    """Tests for CalibrationConfig domain model."""

    def test_reweighting_needs_path_and_name(self):
        """Test that reweighting is only requested with a path and a histogram name."""
        assert not CalibrationConfig().reweighting_requested
        config = CalibrationConfig(path_reweighting="a/b", histo_name_weight_antip_jet="w_jet")
        assert config.reweighting_requested

    def test_unfolding_requested_by_default(self):
        """Test the default unfolding setup."""
        assert CalibrationConfig().unfolding_requested
        assert not CalibrationConfig(apply_pt_unfolding=False).unfolding_requested


class TestAnalysisConfig:
    """Tests for AnalysisConfig domain model."""

    def test_default_is_valid(self):
        """Test that every field has a usable default."""
        config = AnalysisConfig()
        assert config.systematics == DEFAULT_SYSTEMATIC_VARIATIONS
        assert len(config.systematics) == 10

    def test_no_modes_enabled_fails(self):
        """Test that disabling every mode raises ValueError."""
        with pytest.raises(ValueError, match="At least one mode"):
            AnalysisConfig(modes=ModeConfig(do_data=False))

    def test_duplicate_systematic_names_fail(self):
        """Test that variation names must be unique."""
        variation = SystematicVariation("same", 5, 100, 0.05, 0.1)
        with pytest.raises(ValueError, match="unique"):
            AnalysisConfig(systematics=(variation, variation))

    def test_from_dict(self):
        """Test creating config from a YAML-like dictionary."""
        config = AnalysisConfig.from_dict({
            "modes": {"do_data": False, "do_qc": True},
            "jets": {"min_jet_pt": 5.0},
            "event_selection": {"random_seed": 7},
            "systematics": [
                {"name": "loose", "min_its_nclusters": 3, "min_tpc_ncrossed_rows": 70,
                 "max_dca_xy": 0.2, "max_dca_z": 0.3},
            ],
        })

        assert config.modes.enabled_modes() == ["qc"]
        assert config.jets.min_jet_pt == 5.0
        assert config.jets.r_jet == 0.3
        assert config.event_selection.random_seed == 7
        assert [v.name for v in config.systematics] == ["loose"]

    def test_from_empty_dict(self):
        """Test that an empty YAML document gives the default configuration."""
        assert AnalysisConfig.from_dict(None) == AnalysisConfig()

    def test_from_dict_unknown_key_fails(self):
        """Test that a misspelled key is reported."""
        with pytest.raises(ValueError, match="Unknown keys in 'jets'"):
            AnalysisConfig.from_dict({"jets": {"rjet": 0.4}})


class TestTrack:
    """Tests for Track domain model."""

    def test_from_momentum_derives_kinematics(self):
        """Test pt / phi derivation from the momentum components."""
        track = Track.from_momentum(3.0, 4.0, 0.0, sign=-1)
        assert track.pt == pytest.approx(5.0)
        assert track.eta == pytest.approx(0.0)
        assert track.p == pytest.approx(5.0)

    def test_invalid_sign_fails(self):
        """Test that a sign outside {-1, 0, 1} raises ValueError."""
        with pytest.raises(ValueError, match="sign"):
            Track.from_momentum(1.0, 0.0, 0.0, sign=2)

    def test_species_accessors(self):
        """Test the per-species significance lookups."""
        track = Track.from_momentum(1.0, 0.0, 0.0, sign=1, tpc_nsigma_de=1.2, tof_nsigma_pr=-0.4)
        assert track.tpc_nsigma(Species.DEUTERON) == 1.2
        assert track.tof_nsigma(Species.PROTON) == -0.4
        assert not track.has_mc_particle


class TestCollision:
    """Tests for Collision domain model."""

    def test_truth_link_out_of_range_fails(self, make_track):
        """Test that a dangling truth link raises ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            Collision(sel8=True, pos_z=0.0, tracks=(make_track(mc_particle_index=0),))

    def test_mc_particle_of(self, make_track, make_particle):
        """Test resolving a track's truth link."""
        particle = make_particle(pdg_code=-2212)
        matched = make_track(mc_particle_index=0)
        unmatched = make_track()
        collision = Collision(sel8=True, pos_z=0.0, tracks=(matched, unmatched),
                              mc_particles=(particle,))

        assert collision.mc_particle_of(matched) is particle
        assert collision.mc_particle_of(unmatched) is None


class TestJets:
    """Tests for the jet domain models."""

    def test_pseudo_particle_pion_energy(self):
        """Test the charged-pion mass hypothesis."""
        particle = PseudoParticle.from_momentum(1.0, 0.0, 0.0, index=3)
        assert particle.e == pytest.approx((1.0 + 0.13957039 ** 2) ** 0.5)
        assert particle.index == 3

    def test_negative_index_fails(self):
        """Test that a negative back-reference raises ValueError."""
        with pytest.raises(ValueError, match="index"):
            PseudoParticle(1.0, 0.0, 0.0, 1.0, index=-1)

    def test_jet_from_kinematics(self):
        """Test building a jet from (pt, eta, phi)."""
        jet = Jet.from_kinematics(pt=20.0, eta=0.2, phi=1.0, area=0.3, constituents=(0, 1))
        assert jet.pt == pytest.approx(20.0)
        assert jet.eta == pytest.approx(0.2)
        assert jet.phi == pytest.approx(1.0)
        assert jet.n_constituents == 2

    def test_duplicate_constituents_fail(self):
        """Test that a constituent index may appear once."""
        with pytest.raises(ValueError, match="unique"):
            Jet.from_kinematics(pt=20.0, eta=0.0, phi=0.0, area=0.3, constituents=(1, 1))

    def test_negative_background_fails(self):
        """Test that rho < 0 raises ValueError."""
        with pytest.raises(ValueError, match="non-negative"):
            BackgroundEstimate(rho=-1.0)


class TestHistogram2D:
    """Tests for Histogram2D domain model."""

    def _histogram(self):
        return Histogram2D(
            name="h",
            values=np.arange(6, dtype=float).reshape(2, 3),
            x_edges=np.array([0.0, 1.0, 2.0]),
            y_edges=np.array([-1.0, 0.0, 1.0, 2.0]),
        )

    def test_shape_mismatch_fails(self):
        """Test that values must match the edges."""
        with pytest.raises(ValueError, match="does not match"):
            Histogram2D("h", np.zeros((3, 3)), np.array([0.0, 1.0]), np.array([0.0, 1.0]))

    def test_find_bin(self):
        """Test bin lookup inside and outside the range."""
        histogram = self._histogram()
        assert histogram.find_x_bin(1.5) == 1
        assert histogram.find_x_bin(2.0) is None
        assert histogram.find_bin(0.5, 1.5) == (0, 2)
        assert histogram.find_bin(0.5, 5.0) is None

    def test_projection_y(self):
        """Test the y projection at fixed x bin."""
        np.testing.assert_array_equal(self._histogram().projection_y(1), [3.0, 4.0, 5.0])


class TestStatistics:
    """Tests for ModeStatistics and RunStatistics."""

    def test_from_outcomes(self):
        """Test building statistics from terminal outcomes."""
        outcomes = Counter({"completed": 6, "failed": 1, "skipped:vertex_z": 2, "skipped:sel8": 1})
        stats = ModeStatistics.from_outcomes("data", outcomes, elapsed_time_sec=1.5)

        assert stats.events_seen == 10
        assert stats.events_completed == 6
        assert stats.events_skipped == 3
        assert stats.completion_rate == pytest.approx(60.0)
        assert stats.to_dict()["skip_reasons"] == {"sel8": 1, "vertex_z": 2}

    def test_inconsistent_counts_fail(self):
        """Test that the outcome counts must add up."""
        with pytest.raises(ValueError, match="must equal events_seen"):
            ModeStatistics(mode="data", events_seen=5, events_completed=1, events_failed=0)

    def test_run_statistics(self):
        """Test run-level aggregation."""
        start = datetime.now()
        failed = ModeStatistics.from_outcomes("qc", Counter({"failed": 1}), 0.0)
        stats = RunStatistics(modes=(failed,), start_time=start, end_time=start + timedelta(seconds=4))

        assert stats.total_time_sec == pytest.approx(4.0)
        assert stats.has_failures
        assert stats.to_dict()["modes"][0]["mode"] == "qc"

    def test_end_before_start_fails(self):
        """Test that end_time must not precede start_time."""
        start = datetime.now()
        with pytest.raises(ValueError, match="end_time"):
            RunStatistics(modes=(), start_time=start, end_time=start - timedelta(seconds=1))
