"""
Configuration domain models.

Validated configuration objects for the analysis.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class ModeConfig:
    """Configuration for which execution modes to run."""

    do_data: bool = True
    do_qc: bool = False
    do_efficiency: bool = False
    do_jets_mc_gen: bool = False
    do_jets_mc_rec: bool = False
    do_systematics_data: bool = False
    do_systematics_efficiency: bool = False

    def any_enabled(self) -> bool:
        """Check if any mode is enabled."""
        return any(self.enabled_modes())

    def enabled_modes(self) -> list[str]:
        """Names of the enabled modes, in declaration order."""
        return [
            name[len("do_"):]
            for name, enabled in vars(self).items()
            if enabled
        ]


@dataclass(frozen=True)
class JetConfig:
    """Jet clustering, background and selection parameters."""

    min_jet_pt: float = 10.0
    r_jet: float = 0.3
    delta_eta_edge: float = 0.05
    ghost_area_max_rap: float = 1.0

    # Background estimation
    background_method: str = "median"
    n_hard_reject: int = 2
    bkg_eta_max: float = 0.9
    bkg_cone_radius: float = 0.2
    use_rho_m: bool = False

    def __post_init__(self):
        """Validate jet configuration."""
        if self.r_jet <= 0:
            raise ValueError(f"r_jet must be positive, got {self.r_jet}")
        if self.delta_eta_edge < 0:
            raise ValueError(f"delta_eta_edge must be non-negative, got {self.delta_eta_edge}")
        if self.ghost_area_max_rap <= 0:
            raise ValueError(f"ghost_area_max_rap must be positive, got {self.ghost_area_max_rap}")
        if self.background_method not in ("median", "perp_cone"):
            raise ValueError(
                f"background_method must be 'median' or 'perp_cone', got {self.background_method!r}"
            )
        if self.n_hard_reject < 0:
            raise ValueError(f"n_hard_reject must be non-negative, got {self.n_hard_reject}")
        if self.bkg_cone_radius <= 0:
            raise ValueError(f"bkg_cone_radius must be positive, got {self.bkg_cone_radius}")
        if self.bkg_eta_max <= self.r_jet:
            raise ValueError(
                f"bkg_eta_max must be larger than r_jet, got {self.bkg_eta_max} <= {self.r_jet}"
            )


@dataclass(frozen=True)
class EventSelectionConfig:
    """Event-level gates."""

    z_vtx: float = 10.0
    reject_events: bool = False
    rejection_percentage: int = 3
    random_seed: Optional[int] = None

    def __post_init__(self):
        """Validate event selection."""
        if self.z_vtx <= 0:
            raise ValueError(f"z_vtx must be positive, got {self.z_vtx}")
        if not 0 <= self.rejection_percentage <= 100:
            raise ValueError(
                f"rejection_percentage must be within [0, 100], got {self.rejection_percentage}"
            )


@dataclass(frozen=True)
class TrackCuts:
    """
    Physics track selection.

    All thresholds are run-time parameters. Systematic variations are
    derived from this object with ``with_variation``.
    """

    require_pv_contributor: bool = False
    min_its_nclusters: int = 5
    min_tpc_ncrossed_rows: float = 80
    min_tpc_ncrossed_rows_over_findable: float = 0.8
    max_chi_square_tpc: float = 4.0
    max_chi_square_its: float = 36.0
    min_pt: float = 0.3
    min_eta: float = -0.8
    max_eta: float = 0.8
    max_dca_xy: float = 0.05
    max_dca_z: float = 0.05

    def __post_init__(self):
        """Validate track cuts."""
        if self.min_eta >= self.max_eta:
            raise ValueError(f"min_eta ({self.min_eta}) must be below max_eta ({self.max_eta})")
        if self.max_dca_xy <= 0 or self.max_dca_z <= 0:
            raise ValueError("DCA ceilings must be positive")
        if self.min_pt < 0:
            raise ValueError(f"min_pt must be non-negative, got {self.min_pt}")

    def with_variation(self, variation: "SystematicVariation") -> "TrackCuts":
        """Return a copy with the cuts overridden by a systematic variation."""
        return replace(
            self,
            min_its_nclusters=variation.min_its_nclusters,
            min_tpc_ncrossed_rows=variation.min_tpc_ncrossed_rows,
            max_dca_xy=variation.max_dca_xy,
            max_dca_z=variation.max_dca_z,
        )


@dataclass(frozen=True)
class PidConfig:
    """Particle identification windows and ITS-PID pt ceilings."""

    apply_its_pid: bool = True
    nsigma_its_min: float = -2.0
    nsigma_its_max: float = 2.0
    pt_max_its_pid_prot: float = 1.0
    pt_max_its_pid_deut: float = 1.0
    pt_max_its_pid_hel: float = 1.0

    min_nsigma_tpc: float = -3.0
    max_nsigma_tpc: float = 3.0
    min_nsigma_tof: float = -3.0
    max_nsigma_tof: float = 3.5

    def __post_init__(self):
        """Validate PID windows."""
        for low, high, label in (
            (self.nsigma_its_min, self.nsigma_its_max, "ITS"),
            (self.min_nsigma_tpc, self.max_nsigma_tpc, "TPC"),
            (self.min_nsigma_tof, self.max_nsigma_tof, "TOF"),
        ):
            if low >= high:
                raise ValueError(f"{label} nsigma window is empty: [{low}, {high}]")


@dataclass(frozen=True)
class CalibrationConfig:
    """Remote calibration objects (reweighting and pt unfolding)."""

    url: str = "http://alice-ccdb.cern.ch"
    timeout: int = 30
    cache_dir: Optional[str] = None

    apply_reweighting: bool = True
    path_reweighting: str = ""
    histo_name_weight_antip_jet: str = ""
    histo_name_weight_antip_ue: str = ""

    apply_pt_unfolding: bool = True
    path_pt_unfolding: str = "Users/c/chpinto/My/Object/ResponseMatrix"
    histo_name_pt_unfolding: str = "detectorResponseMatrix"

    def __post_init__(self):
        """Validate calibration configuration."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def reweighting_requested(self) -> bool:
        """Reweighting needs a path and at least one histogram name."""
        return self.apply_reweighting and bool(self.path_reweighting) and bool(
            self.histo_name_weight_antip_jet or self.histo_name_weight_antip_ue
        )

    @property
    def unfolding_requested(self) -> bool:
        return self.apply_pt_unfolding and bool(self.path_pt_unfolding)


@dataclass(frozen=True)
class SystematicVariation:
    """One named set of track-cut overrides for the systematic sweeps."""

    name: str
    min_its_nclusters: int
    min_tpc_ncrossed_rows: float
    max_dca_xy: float
    max_dca_z: float

    def __post_init__(self):
        """Validate variation."""
        if not self.name:
            raise ValueError("systematic variation name cannot be empty")
        if self.max_dca_xy <= 0 or self.max_dca_z <= 0:
            raise ValueError(f"DCA ceilings must be positive in variation {self.name}")


DEFAULT_SYSTEMATIC_VARIATIONS = tuple(
    SystematicVariation(f"var{i}", its, tpc, dcaxy, dcaz)
    for i, (its, tpc, dcaxy, dcaz) in enumerate([
        (5, 100, 0.05, 0.1),
        (6, 85, 0.07, 0.15),
        (5, 80, 0.10, 0.3),
        (4, 110, 0.03, 0.075),
        (5, 95, 0.06, 0.12),
        (3, 90, 0.15, 0.18),
        (5, 105, 0.08, 0.2),
        (6, 95, 0.04, 0.1),
        (3, 100, 0.09, 0.15),
        (4, 105, 0.10, 0.2),
    ])
)


@dataclass(frozen=True)
class InputConfig:
    """Event source configuration."""

    path: Optional[str] = None
    tree_name: str = "events"
    show_progress_bar: bool = True
    max_events: Optional[int] = None

    def __post_init__(self):
        """Validate input configuration."""
        if self.max_events is not None and self.max_events <= 0:
            raise ValueError(f"max_events must be positive, got {self.max_events}")


@dataclass(frozen=True)
class OutputConfig:
    """Output locations."""

    base_output_dir: str = "./output"
    run_name: str = "antinuclei_in_jets"
    histograms_filename: str = "AnalysisResults.root"

    def __post_init__(self):
        """Validate output configuration."""
        if not self.histograms_filename:
            raise ValueError("histograms_filename cannot be empty")


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Complete analysis configuration.

    Immutable configuration object validated at creation. Every field
    has a default, so ``AnalysisConfig()`` is a valid data-mode setup.
    """

    modes: ModeConfig = field(default_factory=ModeConfig)
    jets: JetConfig = field(default_factory=JetConfig)
    event_selection: EventSelectionConfig = field(default_factory=EventSelectionConfig)
    track_selection: TrackCuts = field(default_factory=TrackCuts)
    pid: PidConfig = field(default_factory=PidConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    systematics: tuple[SystematicVariation, ...] = DEFAULT_SYSTEMATIC_VARIATIONS
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        """Validate analysis configuration."""
        if not self.modes.any_enabled():
            raise ValueError("At least one mode must be enabled")

        uses_systematics = self.modes.do_systematics_data or self.modes.do_systematics_efficiency
        if uses_systematics and not self.systematics:
            raise ValueError("systematics list cannot be empty when a systematics mode is enabled")

        names = [v.name for v in self.systematics]
        if len(names) != len(set(names)):
            raise ValueError(f"systematic variation names must be unique, got {names}")

    @classmethod
    def from_dict(cls, config_dict: Optional[dict]) -> 'AnalysisConfig':
        """
        Create AnalysisConfig from a dictionary (e.g., loaded from YAML).

        Unknown keys inside a section raise ``ValueError`` so typos do not
        silently fall back to defaults.

        Args:
            config_dict: Dictionary with configuration values, may be None

        Returns:
            Validated AnalysisConfig instance
        """
        config_dict = config_dict or {}

        systematics = DEFAULT_SYSTEMATIC_VARIATIONS
        if config_dict.get("systematics"):
            systematics = tuple(
                SystematicVariation(**entry) for entry in config_dict["systematics"]
            )

        return cls(
            modes=_build_section(ModeConfig, config_dict, "modes"),
            jets=_build_section(JetConfig, config_dict, "jets"),
            event_selection=_build_section(EventSelectionConfig, config_dict, "event_selection"),
            track_selection=_build_section(TrackCuts, config_dict, "track_selection"),
            pid=_build_section(PidConfig, config_dict, "pid"),
            calibration=_build_section(CalibrationConfig, config_dict, "calibration"),
            systematics=systematics,
            input=_build_section(InputConfig, config_dict, "input"),
            output=_build_section(OutputConfig, config_dict, "output"),
        )


def _build_section(section_cls, config_dict: dict, key: str):
    section = config_dict.get(key) or {}
    known = set(section_cls.__dataclass_fields__)
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{key}' section: {sorted(unknown)}")
    return section_cls(**section)
