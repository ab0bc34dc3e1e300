"""
AnalysisExecutor - High-level analysis orchestrator.

Wires together all services, builds one per-event state machine per
enabled execution mode and runs every event through each of them.

Output layout under the run directory:
    histograms/<histograms_filename>  - one ROOT directory per mode
    logs/run_stats.json               - per-mode event bookkeeping
"""

import json
import logging
import os
import time
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

import numpy as np
from tqdm import tqdm

from domain.config import AnalysisConfig
from domain.statistics import ModeStatistics, RunStatistics
from domain.tracks import Collision
from orchestration import EventState, EventStateMachine
from orchestration.handlers import (
    EventRejectionHandler,
    EventSelectionHandler,
    JetInputHandler,
    ClusteringHandler,
    JetAnalysisHandler,
    TrackAnalysisHandler,
)
from services.analysis import (
    ModeAnalyzer,
    DataAnalyzer,
    QCAnalyzer,
    EfficiencyAnalyzer,
    GeneratedJetsAnalyzer,
    ReconstructedJetsAnalyzer,
    SystematicsDataAnalyzer,
    SystematicsEfficiencyAnalyzer,
)
from services.calibration import CalibrationCache, CalibrationFetcher, PtUnfolding, ReweightingTable
from services.histograms import HistogramRegistry, definitions, write_registries
from services.jets import BackgroundSubtractor, JetClusterer, JetSelector
from services.selection import PidSelector

ANALYZER_CLASSES = {
    cls.mode: cls
    for cls in (
        DataAnalyzer,
        QCAnalyzer,
        EfficiencyAnalyzer,
        GeneratedJetsAnalyzer,
        ReconstructedJetsAnalyzer,
        SystematicsDataAnalyzer,
        SystematicsEfficiencyAnalyzer,
    )
}


class AnalysisExecutor:
    """
    High-level analysis executor.

    Responsible for:
    1. Creating all services with dependency injection
    2. Fetching the calibration objects once
    3. Building one state machine per enabled mode
    4. Running events and collecting statistics
    5. Writing histograms and statistics
    """

    def __init__(self, config: AnalysisConfig, rng: Optional[np.random.Generator] = None,
                 fetcher: Optional[CalibrationFetcher] = None):
        """
        Initialize executor.

        Args:
            config: Validated analysis configuration
            rng: Random source for event rejection and unfolding;
                 seeded from ``event_selection.random_seed`` when omitted
            fetcher: Calibration fetcher; built from the configuration when omitted
        """
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.event_selection.random_seed)
        self.logger = logging.getLogger(self.__class__.__name__)

        self.services = self._create_services(fetcher)
        self.analyzers = self._create_analyzers()
        self.state_machines = {
            mode: self._build_state_machine(analyzer)
            for mode, analyzer in self.analyzers.items()
        }
        self.logger.info(f"Enabled modes: {list(self.analyzers)}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def registries(self) -> list[HistogramRegistry]:
        return [analyzer.registry for analyzer in self.analyzers.values()]

    def run(self, collisions: Iterable[Collision], total: Optional[int] = None) -> RunStatistics:
        """
        Run every collision through every enabled mode.

        Args:
            collisions: Event source
            total: Expected number of events, for the progress bar

        Returns:
            RunStatistics for the run
        """
        start_time = datetime.now()
        outcomes = {mode: Counter() for mode in self.state_machines}
        elapsed = {mode: 0.0 for mode in self.state_machines}

        progress = tqdm(
            collisions,
            total=total,
            desc="Processing events",
            unit="event",
            dynamic_ncols=True,
            mininterval=1,
            disable=not self.config.input.show_progress_bar,
        )
        for collision in progress:
            for mode, machine in self.state_machines.items():
                t0 = time.perf_counter()
                context = machine.run(collision)
                elapsed[mode] += time.perf_counter() - t0
                outcomes[mode][context.outcome] += 1

        stats = RunStatistics(
            modes=tuple(
                ModeStatistics.from_outcomes(mode, outcomes[mode], elapsed[mode])
                for mode in self.state_machines
            ),
            start_time=start_time,
            end_time=datetime.now(),
        )
        self._log_results(stats)
        return stats

    def write_output(self, run_dir: str, stats: RunStatistics) -> str:
        """
        Write histograms and run statistics below ``run_dir``.

        Returns:
            Path of the histogram file
        """
        hist_dir = os.path.join(run_dir, "histograms")
        logs_dir = os.path.join(run_dir, "logs")
        os.makedirs(hist_dir, exist_ok=True)
        os.makedirs(logs_dir, exist_ok=True)

        hist_path = os.path.join(hist_dir, self.config.output.histograms_filename)
        n_written = write_registries(self.registries, hist_path)
        self.logger.info(f"Saved {n_written} histograms to: {hist_path}")

        stats_path = os.path.join(logs_dir, "run_stats.json")
        with open(stats_path, "w") as f:
            json.dump(stats.to_dict(), f, indent=2, default=str)
        self.logger.info(f"Saved run stats to: {stats_path}")

        return hist_path

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _create_services(self, fetcher: Optional[CalibrationFetcher]) -> dict:
        cfg = self.config
        services = {
            "pid": PidSelector(cfg.pid),
            "clusterer": JetClusterer(
                r_jet=cfg.jets.r_jet,
                ghost_area_max_rap=cfg.jets.ghost_area_max_rap,
            ),
            "subtractor": BackgroundSubtractor(
                method=cfg.jets.background_method,
                n_hard_reject=cfg.jets.n_hard_reject,
                eta_max=cfg.jets.bkg_eta_max,
                cone_radius=cfg.jets.bkg_cone_radius,
                use_rho_m=cfg.jets.use_rho_m,
                r_jet=cfg.jets.r_jet,
                ghost_area_max_rap=cfg.jets.ghost_area_max_rap,
            ),
        }

        enabled = set(cfg.modes.enabled_modes())
        needs_unfolding = cfg.calibration.unfolding_requested and any(
            ANALYZER_CLASSES[mode].uses_jets and ANALYZER_CLASSES[mode].uses_unfolding
            for mode in enabled
        )
        needs_reweighting = "jets_mc_rec" in enabled and cfg.calibration.reweighting_requested

        if fetcher is None and (needs_unfolding or needs_reweighting):
            cache = None
            if cfg.calibration.cache_dir:
                cache = CalibrationCache(cfg.calibration.cache_dir)
            fetcher = CalibrationFetcher(
                base_url=cfg.calibration.url,
                timeout=cfg.calibration.timeout,
                cache=cache,
            )

        response_matrix = None
        if needs_unfolding:
            response_matrix = fetcher.fetch_histogram(
                cfg.calibration.path_pt_unfolding,
                cfg.calibration.histo_name_pt_unfolding,
            )
        services["unfolding"] = PtUnfolding(response_matrix, self.rng) if needs_unfolding else None

        weights = {"jet": None, "ue": None}
        if needs_reweighting:
            names = {
                region: f"{name}_antiproton"
                for region, name in (
                    ("jet", cfg.calibration.histo_name_weight_antip_jet),
                    ("ue", cfg.calibration.histo_name_weight_antip_ue),
                )
                if name
            }
            histograms = fetcher.fetch_histograms(cfg.calibration.path_reweighting, names.values())
            weights = {region: histograms.get(names.get(region)) for region in weights}
        services["weight_jet"] = ReweightingTable(weights["jet"])
        services["weight_ue"] = ReweightingTable(weights["ue"])

        return services

    def _create_analyzers(self) -> dict[str, ModeAnalyzer]:
        cfg = self.config
        cuts = cfg.track_selection
        pid = self.services["pid"]
        n_variations = len(cfg.systematics)

        builders = {
            "data": lambda r: DataAnalyzer(definitions.book_data(r), cuts, pid),
            "qc": lambda r: QCAnalyzer(definitions.book_qc(r), cuts, pid, r_jet=cfg.jets.r_jet),
            "efficiency": lambda r: EfficiencyAnalyzer(definitions.book_efficiency(r), cuts, pid),
            "jets_mc_gen": lambda r: GeneratedJetsAnalyzer(definitions.book_jets_mc_gen(r), cuts, pid),
            "jets_mc_rec": lambda r: ReconstructedJetsAnalyzer(
                definitions.book_jets_mc_rec(r), cuts, pid,
                weight_jet=self.services["weight_jet"],
                weight_ue=self.services["weight_ue"],
            ),
            "systematics_data": lambda r: SystematicsDataAnalyzer(
                definitions.book_systematics_data(r, n_variations), cuts, pid, cfg.systematics,
            ),
            "systematics_efficiency": lambda r: SystematicsEfficiencyAnalyzer(
                definitions.book_systematics_efficiency(r, n_variations), cuts, pid, cfg.systematics,
            ),
        }

        return {
            mode: builders[mode](HistogramRegistry(mode))
            for mode in cfg.modes.enabled_modes()
        }

    def _build_state_machine(self, analyzer: ModeAnalyzer) -> EventStateMachine:
        handlers = self._create_handlers(analyzer)
        return EventStateMachine(analyzer.mode, handlers, EventState.EVENT_SELECTION)

    def _create_handlers(self, analyzer: ModeAnalyzer) -> dict:
        cfg = self.config
        rejection_enabled = cfg.event_selection.reject_events and analyzer.supports_rejection

        handlers = {
            EventState.EVENT_SELECTION: EventSelectionHandler(
                analyzer, cfg.event_selection.z_vtx, rejection_enabled=rejection_enabled
            ),
        }
        if rejection_enabled:
            handlers[EventState.EVENT_REJECTION] = EventRejectionHandler(
                analyzer, self.rng, cfg.event_selection.rejection_percentage
            )

        if not analyzer.uses_jets:
            handlers[EventState.TRACK_ANALYSIS] = TrackAnalysisHandler(analyzer)
            return handlers

        selector = JetSelector(
            cfg.jets,
            self.services["subtractor"],
            max_eta=cfg.track_selection.max_eta,
            unfolding=self.services["unfolding"] if analyzer.uses_unfolding else None,
        )
        handlers[EventState.JET_INPUT] = JetInputHandler(analyzer)
        handlers[EventState.CLUSTERING] = ClusteringHandler(
            analyzer, self.services["clusterer"], self.services["subtractor"]
        )
        handlers[EventState.JET_ANALYSIS] = JetAnalysisHandler(analyzer, selector)
        return handlers

    def _log_results(self, stats: RunStatistics):
        self.logger.info("=" * 60)
        self.logger.info("Analysis Execution Summary")
        self.logger.info("=" * 60)

        for mode_stats in stats.modes:
            self.logger.info(f"[{mode_stats.mode}]")
            for key, value in mode_stats.to_dict().items():
                if key != "mode":
                    self.logger.info(f"  {key:25s}: {value}")

        self.logger.info(f"{'total_time_sec':27s}: {stats.total_time_sec:.1f}")
        if stats.has_failures:
            self.logger.warning("Some events failed, see the log above for details")
        self.logger.info("=" * 60)
