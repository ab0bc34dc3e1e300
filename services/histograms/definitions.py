"""
Histogram booking for each execution mode.

Fixed binning; pt axes scale with the species (x2 for deuterons, x3 for
helium-3, which is filled at 2 * pt).
"""

import math

from services.histograms.registry import HistogramRegistry, regular

PT_BINS = 120
PT_MIN = 0.0
PT_MAX = 6.0

PT_LABEL = "p_{T} (GeV/c)"


def pt_axis(scale: float = 1.0):
    return regular(PT_BINS, PT_MIN * scale, PT_MAX * scale, PT_LABEL)


def nsigma_axis(detector: str):
    return regular(400, -20.0, 20.0, f"n#sigma_{{{detector}}}")


def counter_axis():
    return regular(10, 0.0, 10.0, "counter")


def syst_axis(n_variations: int):
    return regular(n_variations, 0.0, float(n_variations), "systematic uncertainty")


def eta_pt_axes():
    return [regular(200, 0.0, 10.0, PT_LABEL), regular(20, -1.0, 1.0, "#eta")]


def book_data(registry: HistogramRegistry) -> HistogramRegistry:
    registry.add("number_of_events_data", "number of events in data", [counter_axis()])
    registry.add("number_of_jets_data", "number of selected jets in data", [counter_axis()])
    registry.add("number_of_rejected_events", "check on number of events rejected", [counter_axis()])

    for region in ("jet", "ue"):
        registry.add(f"antiproton_{region}_tpc", f"antiproton_{region}_tpc", [pt_axis(), nsigma_axis("TPC")])
        registry.add(f"antiproton_{region}_tof", f"antiproton_{region}_tof", [pt_axis(), nsigma_axis("TOF")])
        registry.add(f"antiproton_dca_{region}", f"antiproton_dca_{region}",
                     [pt_axis(), regular(200, -0.5, 0.5, "DCA_{xy} (cm)")])
        registry.add(f"antideuteron_{region}_tpc", f"antideuteron_{region}_tpc", [pt_axis(2), nsigma_axis("TPC")])
        registry.add(f"antideuteron_{region}_tof", f"antideuteron_{region}_tof", [pt_axis(2), nsigma_axis("TOF")])
        registry.add(f"deuteron_{region}_tof", f"deuteron_{region}_tof", [pt_axis(2), nsigma_axis("TOF")])
        registry.add(f"antihelium3_{region}_tpc", f"antihelium3_{region}_tpc", [pt_axis(3), nsigma_axis("TPC")])
        registry.add(f"helium3_{region}_tpc", f"helium3_{region}_tpc", [pt_axis(3), nsigma_axis("TPC")])
    return registry


def book_qc(registry: HistogramRegistry) -> HistogramRegistry:
    delta_axes = [regular(200, -0.5, 0.5, "#Delta#eta"), regular(200, 0.0, math.pi / 2, "#Delta#phi")]
    registry.add("deltaEta_deltaPhi_jet", "deltaEta_deltaPhi_jet", delta_axes)
    registry.add("deltaEta_deltaPhi_ue", "deltaEta_deltaPhi_ue",
                 [regular(200, -0.5, 0.5, "#Delta#eta"), regular(200, 0.0, math.pi / 2, "#Delta#phi")])
    registry.add("eta_phi_jet", "eta_phi_jet",
                 [regular(200, -0.5, 0.5, "#eta_{jet}"), regular(200, 0.0, 2 * math.pi, "#phi_{jet}")])
    registry.add("eta_phi_ue", "eta_phi_ue",
                 [regular(200, -0.5, 0.5, "#eta_{UE}"), regular(200, 0.0, 2 * math.pi, "#phi_{UE}")])

    for name in ("NchJetCone", "NchJet", "NchUE"):
        registry.add(name, name, [regular(100, 0.0, 100.0, "N_{ch}")])
    for name in ("sumPtJetCone", "sumPtJet", "sumPtUE"):
        registry.add(name, name, [regular(500, 0.0, 50.0, PT_LABEL)])
    for name in ("nJetsFound", "nJetsInAcceptance", "nJetsSelectedHighPt"):
        registry.add(name, name, [regular(50, 0.0, 50.0, "n_{jet}")])

    registry.add("jetEffectiveArea", "jetEffectiveArea", [regular(2000, 0.0, 2.0, "Area/#piR^{2}")])
    registry.add("jetPtDifference", "jetPtDifference", [regular(200, -1.0, 1.0, "#Delta p_{T}^{jet}")])
    return registry


def book_efficiency(registry: HistogramRegistry) -> HistogramRegistry:
    registry.add("number_of_events_mc", "number of events in mc", [counter_axis()])

    registry.add("antiproton_incl_gen", "antiproton_incl_gen", [pt_axis()])
    for name, scale in (("deuteron", 2), ("antideuteron", 2), ("helium3", 3), ("antihelium3", 3)):
        registry.add(f"{name}_incl_gen", f"{name}_incl_gen", [pt_axis(scale)])

    for name, scale in (("antiproton", 1), ("antideuteron", 2), ("deuteron", 2),
                        ("antihelium3", 3), ("helium3", 3)):
        registry.add(f"{name}_incl_rec_tpc", f"{name}_incl_rec_tpc", [pt_axis(scale)])
    for name, scale in (("antiproton", 1), ("antideuteron", 2), ("deuteron", 2)):
        registry.add(f"{name}_incl_rec_tof", f"{name}_incl_rec_tof", [pt_axis(scale)])

    registry.add("antiproton_incl_prim", "antiproton_incl_prim", [pt_axis()])
    registry.add("antiproton_incl_all", "antiproton_incl_all", [pt_axis()])
    registry.add("antiproton_eta_pt_pythia", "antiproton_eta_pt_pythia", eta_pt_axes())
    return registry


def book_jets_mc_gen(registry: HistogramRegistry) -> HistogramRegistry:
    registry.add("number_of_events_mc_gen", "number of events in mc (generated jets)", [counter_axis()])
    for region in ("jet", "ue"):
        registry.add(f"antiproton_{region}_gen", f"antiproton_{region}_gen", [pt_axis()])
        registry.add(f"antiproton_eta_pt_{region}", f"antiproton_eta_pt_{region}", eta_pt_axes())
    return registry


def book_jets_mc_rec(registry: HistogramRegistry) -> HistogramRegistry:
    registry.add("number_of_events_mc_rec", "number of events in mc (reconstructed jets)", [counter_axis()])
    for region in ("jet", "ue"):
        for suffix in ("prim", "all", "rec_tpc", "rec_tof"):
            name = f"antiproton_{region}_{suffix}"
            registry.add(name, name, [pt_axis()])
    registry.add(
        "detectorResponseMatrix", "detectorResponseMatrix",
        [regular(1000, 0.0, 100.0, "p_{T}^{rec} (GeV/c)"),
         regular(2000, -20.0, 20.0, "p_{T}^{gen} - p_{T}^{rec} (GeV/c)")],
    )
    return registry


def book_systematics_data(registry: HistogramRegistry, n_variations: int) -> HistogramRegistry:
    registry.add("number_of_events_syst", "number of events (systematics)", [counter_axis()])
    registry.add("number_of_rejected_events_syst", "check on number of events rejected", [counter_axis()])
    for name, scale in (("antiproton", 1), ("antideuteron", 2)):
        registry.add(f"{name}_tpc_syst", f"{name}_tpc_syst",
                     [pt_axis(scale), nsigma_axis("TPC"), syst_axis(n_variations)])
        registry.add(f"{name}_tof_syst", f"{name}_tof_syst",
                     [pt_axis(scale), nsigma_axis("TOF"), syst_axis(n_variations)])
    return registry


def book_systematics_efficiency(registry: HistogramRegistry, n_variations: int) -> HistogramRegistry:
    registry.add("number_of_events_mc_syst", "number of events in mc (systematics)", [counter_axis()])
    for name, scale in (("antiproton", 1), ("antideuteron", 2)):
        registry.add(f"{name}_incl_gen_syst", f"{name}_incl_gen_syst", [pt_axis(scale)])
        for suffix in ("prim", "rec_tpc", "rec_tof"):
            hist_name = f"{name}_incl_{suffix}_syst"
            registry.add(hist_name, hist_name, [pt_axis(scale), syst_axis(n_variations)])
    return registry
