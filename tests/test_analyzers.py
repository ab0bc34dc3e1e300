"""
Tests for the per-mode analyzers.
"""

import math

import numpy as np
import pytest

from domain.calibration import Histogram2D
from domain.config import PidConfig, SystematicVariation, TrackCuts
from domain.jets import Jet
from domain.tracks import Collision
from services.analysis import (
    DataAnalyzer,
    EfficiencyAnalyzer,
    GeneratedJetsAnalyzer,
    InclusiveAnalyzer,
    QCAnalyzer,
    ReconstructedJetsAnalyzer,
    SystematicsDataAnalyzer,
    SystematicsEfficiencyAnalyzer,
)
from services.calibration import ReweightingTable
from services.histograms import HistogramRegistry, definitions
from services.jets import JetDecision, UEConePair
from services.selection import PidSelector

VARIATIONS = (
    SystematicVariation("loose", 5, 80, 0.05, 0.05),
    SystematicVariation("tight", 6, 80, 0.05, 0.05),
)


def _total(registry, name):
    return float(registry.get(name).values().sum())


def _selected(pt=15.0, eta=0.0, phi=0.05, area=0.28, constituents=(0, 1, 2)):
    jet = Jet.from_kinematics(pt=pt, eta=eta, phi=phi, area=area, constituents=constituents)
    return JetDecision(jet=jet, in_acceptance=True, subtracted=None, corrected_pt=pt,
                       selected=True, cones=UEConePair.for_jet(jet))


@pytest.fixture
def pid():
    return PidSelector(PidConfig())


class TestDataAnalyzer:
    """Tests for DataAnalyzer."""

    @pytest.fixture
    def analyzer(self, pid):
        return DataAnalyzer(definitions.book_data(HistogramRegistry("data")), TrackCuts(), pid)

    def test_jet_constituents(self, analyzer, jet_event):
        """Test the per-species jet fills for three antiproton-like constituents."""
        analyzer.analyze_selected_jet(jet_event, _selected())

        registry = analyzer.registry
        assert _total(registry, "number_of_jets_data") == 1
        assert _total(registry, "antiproton_jet_tpc") == 3
        assert _total(registry, "antideuteron_jet_tpc") == 3
        assert _total(registry, "antihelium3_jet_tpc") == 3
        assert _total(registry, "antiproton_jet_tof") == 0
        assert _total(registry, "antiproton_ue_tpc") == 0

    def test_ue_track(self, analyzer, jet_event, make_track):
        """Test that a track perpendicular to the jet is filled in the UE region."""
        ue_track = make_track(pt=2.0, eta=0.0, phi=0.05 + math.pi / 2, sign=-1, tpc_nsigma_pr=1.0)
        collision = Collision(sel8=True, pos_z=1.0, tracks=jet_event.tracks + (ue_track,))

        analyzer.analyze_selected_jet(collision, _selected())

        assert _total(analyzer.registry, "antiproton_ue_tpc") == 1
        assert _total(analyzer.registry, "antiproton_jet_tpc") == 3

    def test_dca_filled_before_dca_cut(self, analyzer, make_track):
        """Test that the DCA distribution sees tracks that the DCA cut rejects."""
        track = make_track(pt=0.4, sign=-1, tpc_nsigma_pr=1.0, dca_xy=0.2)

        analyzer.fill_candidate(track, "jet")

        assert _total(analyzer.registry, "antiproton_dca_jet") == 1
        assert _total(analyzer.registry, "antiproton_jet_tpc") == 0

    def test_positive_deuteron_tof(self, analyzer, make_track):
        """Test the deuteron TOF fill for a positive track."""
        track = make_track(pt=2.0, sign=1, has_tof=True, tof_nsigma_de=1.0)

        analyzer.fill_candidate(track, "ue")

        assert _total(analyzer.registry, "deuteron_ue_tof") == 1
        assert _total(analyzer.registry, "helium3_ue_tpc") == 1
        assert _total(analyzer.registry, "antideuteron_ue_tpc") == 0

    def test_rejection_counter(self, analyzer):
        """Test that bin 1.5 counts the events that survive the rejection."""
        analyzer.count_rejection(False)
        analyzer.count_rejection(True)
        analyzer.count_rejection(False)

        values = analyzer.registry.get("number_of_rejected_events").values()
        assert values[0] == 3
        assert values[1] == 2

    def test_jet_mode_has_no_inclusive_path(self, analyzer):
        """Test that jet modes do not carry analyze_tracks."""
        assert analyzer.uses_jets
        assert not isinstance(analyzer, InclusiveAnalyzer)
        assert not hasattr(analyzer, "analyze_tracks")


class TestInclusiveAnalyzer:
    """Tests for InclusiveAnalyzer."""

    def test_analyze_tracks_is_required(self, pid):
        """Test that a jet-free mode without analyze_tracks cannot be built."""
        class NoTracks(InclusiveAnalyzer):
            mode = "no_tracks"

        with pytest.raises(TypeError, match="analyze_tracks"):
            NoTracks(HistogramRegistry("no_tracks"), TrackCuts(), pid)

    def test_efficiency_modes_are_inclusive(self):
        """Test the flags inherited by the efficiency analyzers."""
        for cls in (EfficiencyAnalyzer, SystematicsEfficiencyAnalyzer):
            assert issubclass(cls, InclusiveAnalyzer)
            assert not cls.uses_jets and not cls.uses_unfolding


class TestQCAnalyzer:
    """Tests for QCAnalyzer."""

    def test_selected_jet(self, pid, jet_event):
        """Test the multiplicity split between jet and UE."""
        analyzer = QCAnalyzer(definitions.book_qc(HistogramRegistry("qc")), TrackCuts(), pid, r_jet=0.3)

        analyzer.analyze_selected_jet(jet_event, _selected())
        analyzer.finish_jets(jet_event, [_selected()])

        registry = analyzer.registry
        assert registry.get("NchJetCone").values()[3] == 1
        assert registry.get("NchJet").values()[3] == 1
        assert registry.get("NchUE").values()[0] == 1
        assert _total(registry, "deltaEta_deltaPhi_jet") == 3
        assert _total(registry, "nJetsSelectedHighPt") == 1


class TestEfficiencyAnalyzer:
    """Tests for EfficiencyAnalyzer."""

    def test_generated_and_reconstructed(self, pid, make_track, make_particle):
        """Test the generated spectra and the truth-matched reconstruction."""
        particles = (
            make_particle(pt=1.0, eta=0.1, pdg_code=-2212),
            make_particle(pt=2.0, eta=0.9, pdg_code=-1000010020),
            make_particle(pt=1.5, eta=0.0, pdg_code=-2212, is_physical_primary=False),
        )
        tracks = (
            make_track(pt=1.0, eta=0.1, sign=-1, mc_particle_index=0),
            make_track(pt=1.5, eta=0.0, sign=-1, mc_particle_index=2),
            make_track(pt=1.0, eta=0.0, sign=-1),
        )
        collision = Collision(sel8=True, pos_z=0.0, tracks=tracks, mc_particles=particles)
        analyzer = EfficiencyAnalyzer(definitions.book_efficiency(HistogramRegistry("efficiency")),
                                      TrackCuts(), pid)

        analyzer.analyze_tracks(collision)

        registry = analyzer.registry
        assert _total(registry, "antiproton_eta_pt_pythia") == 1
        assert _total(registry, "antiproton_incl_gen") == 1
        assert _total(registry, "antideuteron_incl_gen") == 0
        assert _total(registry, "antiproton_incl_all") == 2
        assert _total(registry, "antiproton_incl_prim") == 1
        assert _total(registry, "antiproton_incl_rec_tpc") == 1
        assert _total(registry, "antiproton_incl_rec_tof") == 0


class TestGeneratedJetsAnalyzer:
    """Tests for GeneratedJetsAnalyzer."""

    def test_clustering_input(self, pid, make_particle):
        """Test that only primary particles inside the acceptance are clustered."""
        particles = (
            make_particle(pt=1.0, eta=0.0),
            make_particle(pt=1.0, eta=0.9),
            make_particle(pt=1.0, eta=0.0, is_physical_primary=False),
            make_particle(pt=0.05, eta=0.0),
        )
        analyzer = GeneratedJetsAnalyzer(definitions.book_jets_mc_gen(HistogramRegistry("jets_mc_gen")),
                                         TrackCuts(), pid)

        inputs = analyzer.build_jet_input(Collision(sel8=True, pos_z=0.0, mc_particles=particles))

        assert [p.index for p in inputs] == [0]

    def test_jet_and_ue_antiprotons(self, pid, make_particle):
        """Test the antiproton fills in the jet and in the UE cones."""
        particles = (
            make_particle(pt=5.0, phi=0.05, pdg_code=-2212),
            make_particle(pt=5.0, phi=0.05, pdg_code=211),
            make_particle(pt=1.0, phi=0.05 + math.pi / 2, pdg_code=-2212),
        )
        collision = Collision(sel8=True, pos_z=0.0, mc_particles=particles)
        analyzer = GeneratedJetsAnalyzer(definitions.book_jets_mc_gen(HistogramRegistry("jets_mc_gen")),
                                         TrackCuts(), pid)

        analyzer.analyze_selected_jet(collision, _selected(constituents=(0, 1)))

        assert _total(analyzer.registry, "antiproton_jet_gen") == 1
        assert _total(analyzer.registry, "antiproton_ue_gen") == 1
        assert _total(analyzer.registry, "antiproton_eta_pt_ue") == 1


class TestReconstructedJetsAnalyzer:
    """Tests for ReconstructedJetsAnalyzer."""

    @pytest.fixture
    def collision(self, make_track, make_particle):
        particles = (
            make_particle(pt=6.0, phi=0.0, pdg_code=-2212),
            make_particle(pt=5.0, phi=0.05, pdg_code=211),
        )
        tracks = (
            make_track(pt=5.0, phi=0.0, sign=-1, mc_particle_index=0),
            make_track(pt=5.0, phi=0.05, sign=-1, mc_particle_index=1),
            make_track(pt=5.0, phi=0.1, sign=-1),
        )
        return Collision(sel8=True, pos_z=0.0, tracks=tracks, mc_particles=particles)

    def test_response_matrix(self, pid, collision):
        """Test that the matrix is filled with (pt rec, pt gen - pt rec)."""
        analyzer = ReconstructedJetsAnalyzer(definitions.book_jets_mc_rec(HistogramRegistry("jets_mc_rec")),
                                             TrackCuts(), pid)
        decision = _selected(pt=15.0)

        analyzer.on_jet_in_acceptance(collision, decision)

        pt_rec = decision.jet.pt
        pt_gen = sum(particle.pt for particle in collision.mc_particles)
        assert pt_gen == pytest.approx(11.0)

        histogram = analyzer.registry.get("detectorResponseMatrix")
        assert histogram.values().sum() == 1
        x_bin = histogram.axes[0].index(pt_rec)
        y_bin = histogram.axes[1].index(pt_gen - pt_rec)
        assert histogram.values()[x_bin, y_bin] == 1

    def test_weighted_antiproton_fills(self, pid, collision):
        """Test that the reweighting table weights the jet antiproton fills."""
        table = ReweightingTable(Histogram2D(
            name="w", values=np.array([[2.0]]), x_edges=np.array([0.0, 10.0]), y_edges=np.array([-1.0, 1.0]),
        ))
        analyzer = ReconstructedJetsAnalyzer(definitions.book_jets_mc_rec(HistogramRegistry("jets_mc_rec")),
                                             TrackCuts(), pid, weight_jet=table)

        analyzer.analyze_selected_jet(collision, _selected())

        registry = analyzer.registry
        assert _total(registry, "antiproton_jet_all") == pytest.approx(2.0)
        assert _total(registry, "antiproton_jet_prim") == pytest.approx(2.0)
        assert _total(registry, "antiproton_jet_rec_tpc") == pytest.approx(2.0)
        assert _total(registry, "antiproton_ue_all") == 0


class TestSystematicsAnalyzers:
    """Tests for the systematic-variation analyzers."""

    def test_data_variation_index(self, pid, make_track):
        """Test that each passing cut set fills its own bin."""
        collision = Collision(sel8=True, pos_z=0.0, tracks=(
            make_track(pt=5.0, phi=0.05, sign=-1, its_ncls=5, tpc_nsigma_pr=0.5),
        ))
        analyzer = SystematicsDataAnalyzer(
            definitions.book_systematics_data(HistogramRegistry("systematics_data"), len(VARIATIONS)),
            TrackCuts(), pid, VARIATIONS,
        )

        analyzer.analyze_selected_jet(collision, _selected(constituents=(0,)))

        values = analyzer.registry.get("antiproton_tpc_syst").values()
        assert values[:, :, 0].sum() == 1
        assert values[:, :, 1].sum() == 0
        assert _total(analyzer.registry, "antideuteron_tpc_syst") == 1
        assert _total(analyzer.registry, "antiproton_tof_syst") == 0

    def test_efficiency_variations(self, pid, make_track, make_particle):
        """Test the generated and per-variation reconstructed fills."""
        collision = Collision(
            sel8=True,
            pos_z=0.0,
            tracks=(make_track(pt=1.0, sign=-1, its_ncls=6, mc_particle_index=0),),
            mc_particles=(make_particle(pt=1.0, pdg_code=-2212),),
        )
        analyzer = SystematicsEfficiencyAnalyzer(
            definitions.book_systematics_efficiency(HistogramRegistry("systematics_efficiency"), len(VARIATIONS)),
            TrackCuts(), pid, VARIATIONS,
        )

        analyzer.analyze_tracks(collision)

        registry = analyzer.registry
        assert _total(registry, "antiproton_incl_gen_syst") == 1
        assert _total(registry, "antiproton_incl_prim_syst") == 2
        assert _total(registry, "antiproton_incl_rec_tpc_syst") == 2
        assert _total(registry, "antiproton_incl_rec_tof_syst") == 0
