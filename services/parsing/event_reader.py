"""
EventReader service - Single responsibility: read collisions from a ROOT file.

Builds Collision records (tracks plus optional truth particles) from a
TTree or RNTuple written with uproot.
No analysis logic.
"""

import logging
from dataclasses import fields
from typing import Iterator, Optional

import awkward as ak
import uproot

from domain.tracks import Collision, McParticle, Track

TRACK_PREFIX = "tracks"
MC_PREFIX = "mc_particles"

TRACK_REQUIRED = ("pt", "eta", "phi", "px", "py", "pz", "sign")
MC_REQUIRED = ("px", "py", "pz", "pdg_code")


def _column_names(prefix: str, field: str) -> tuple[str, str]:
    # mktree flattens records as "outer_inner", RNTuple subfields are "outer.inner"
    return f"{prefix}_{field}", f"{prefix}.{field}"


class EventReader:
    """
    Reads collisions from a tree with the layout::

        sel8, pos_z                  one value per event
        tracks_<field>               jagged, one entry per track
        mc_particles_<field>         jagged, optional

    ``<field>`` is a Track / McParticle field name. Records written as
    ``tracks.<field>`` subfields (``file["events"] = {"tracks": ak.zip(...)}``
    in uproot 5.7+) are read the same way. Missing optional track fields
    take the Track defaults; ``mc_particle_index`` uses -1 for unmatched
    tracks.
    """

    def __init__(self, file_path: str, tree_name: str = "events", step_size: int = 10_000):
        """
        Initialize reader.

        Args:
            file_path: Path or URI of the ROOT file
            tree_name: Name of the events tree
            step_size: Number of entries read per chunk
        """
        self.file_path = file_path
        self.tree_name = tree_name
        self.step_size = step_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def num_entries(self) -> int:
        with uproot.open(self.file_path) as root_file:
            return root_file[self.tree_name].num_entries

    def iter_collisions(self, max_events: Optional[int] = None) -> Iterator[Collision]:
        """
        Yield collisions in file order.

        Raises:
            KeyError: If the tree or a required branch is missing
        """
        with uproot.open(self.file_path) as root_file:
            tree = root_file[self.tree_name]
            branches = set(tree.keys())
            self._check_required(branches)

            track_fields = self._present_fields(branches, TRACK_PREFIX, Track)
            mc_fields = self._present_fields(branches, MC_PREFIX, McParticle)
            wanted = ["sel8", "pos_z"]
            wanted += [self._resolve(branches, TRACK_PREFIX, f) for f in track_fields]
            wanted += [self._resolve(branches, MC_PREFIX, f) for f in mc_fields]

            self.logger.info(
                f"Reading {tree.num_entries} events from {self.file_path}:{self.tree_name}"
            )

            if any("." in name for name in wanted):
                # Nested records come back under their outer name
                chunks = tree.iterate(step_size=self.step_size, library="ak")
            else:
                chunks = tree.iterate(wanted, step_size=self.step_size, library="ak")

            index = 0
            for chunk in chunks:
                for event in ak.to_list(chunk):
                    if max_events is not None and index >= max_events:
                        return
                    yield self._build_collision(event, track_fields, mc_fields, index)
                    index += 1

    def _check_required(self, branches: set[str]):
        missing = [b for b in ("sel8", "pos_z") if b not in branches]
        missing += [
            f"{TRACK_PREFIX}_{f}" for f in TRACK_REQUIRED
            if self._resolve(branches, TRACK_PREFIX, f) is None
        ]
        has_truth = any(
            b.startswith((f"{MC_PREFIX}_", f"{MC_PREFIX}.")) for b in branches
        )
        if has_truth:
            missing += [
                f"{MC_PREFIX}_{f}" for f in MC_REQUIRED
                if self._resolve(branches, MC_PREFIX, f) is None
            ]
        if missing:
            raise KeyError(f"Missing branches in {self.tree_name}: {missing}")

    @staticmethod
    def _resolve(branches: set[str], prefix: str, field: str) -> Optional[str]:
        for name in _column_names(prefix, field):
            if name in branches:
                return name
        return None

    @classmethod
    def _present_fields(cls, branches: set[str], prefix: str, record_cls) -> list[str]:
        return [f.name for f in fields(record_cls) if cls._resolve(branches, prefix, f.name)]

    @staticmethod
    def _build_collision(event: dict, track_fields: list[str], mc_fields: list[str],
                         index: int) -> Collision:
        tracks = tuple(
            _build_track(dict(zip(track_fields, values)))
            for values in zip(*(_column(event, TRACK_PREFIX, f) for f in track_fields))
        )
        mc_particles = ()
        if mc_fields:
            mc_particles = tuple(
                McParticle(**dict(zip(mc_fields, values)))
                for values in zip(*(_column(event, MC_PREFIX, f) for f in mc_fields))
            )
        return Collision(
            sel8=bool(event["sel8"]),
            pos_z=float(event["pos_z"]),
            tracks=tracks,
            mc_particles=mc_particles,
            index=index,
        )


def _column(event: dict, prefix: str, field: str) -> list:
    for name in _column_names(prefix, field):
        if name in event:
            return event[name]
    return [item[field] for item in event[prefix]]


def _build_track(values: dict) -> Track:
    mc_index = values.pop("mc_particle_index", -1)
    values["mc_particle_index"] = None if mc_index is None or mc_index < 0 else int(mc_index)
    values["sign"] = int(values["sign"])
    return Track(**values)
