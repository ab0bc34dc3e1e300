"""
Shared fixtures for the analysis tests.
"""

import pytest
import vector

from domain.tracks import Collision, McParticle, Track


def _momentum(pt: float, eta: float, phi: float):
    p = vector.obj(pt=pt, eta=eta, phi=phi)
    return float(p.px), float(p.py), float(p.pz)


@pytest.fixture
def make_track():
    """Factory for tracks given (pt, eta, phi); every other field may be overridden."""
    def _make(pt=1.0, eta=0.0, phi=0.0, sign=-1, **kwargs):
        px, py, pz = _momentum(pt, eta, phi)
        return Track.from_momentum(px, py, pz, sign, **kwargs)
    return _make


@pytest.fixture
def make_particle():
    """Factory for truth particles given (pt, eta, phi, pdg)."""
    def _make(pt=1.0, eta=0.0, phi=0.0, pdg_code=-2212, is_physical_primary=True):
        px, py, pz = _momentum(pt, eta, phi)
        return McParticle(px=px, py=py, pz=pz, pdg_code=pdg_code,
                          is_physical_primary=is_physical_primary)
    return _make


@pytest.fixture
def jet_event(make_track):
    """Selected collision with three hard, close antiproton-like tracks."""
    tracks = tuple(
        make_track(pt=5.0, eta=0.0, phi=phi, sign=-1, tpc_nsigma_pr=0.5)
        for phi in (0.0, 0.05, 0.1)
    )
    return Collision(sel8=True, pos_z=1.0, tracks=tracks)
