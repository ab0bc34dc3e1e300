"""
Jet clustering.

Anti-kt clustering with ghosted active areas, through the fastjet bindings.
"""

import logging

import fastjet

from domain.jets import Jet, PseudoParticle


class JetClusterer:
    """
    Clusters pseudo-particles into anti-kt jets with catchment areas.

    Jets are returned sorted by descending pt. Each jet keeps the
    back-reference indices of its constituents; jets made only of ghosts
    are dropped.
    """

    def __init__(self, r_jet: float = 0.3, ghost_area_max_rap: float = 1.0):
        """
        Initialize clusterer.

        Args:
            r_jet: Jet resolution parameter R
            ghost_area_max_rap: Maximum rapidity of the ghost coverage
        """
        self.r_jet = r_jet
        self.ghost_area_max_rap = ghost_area_max_rap
        self.logger = logging.getLogger(self.__class__.__name__)

        self.jet_definition = fastjet.JetDefinition(fastjet.antikt_algorithm, r_jet)
        self.area_definition = fastjet.AreaDefinition(
            fastjet.active_area, fastjet.GhostedAreaSpec(ghost_area_max_rap)
        )

    def cluster(self, particles: list[PseudoParticle]) -> list[Jet]:
        """
        Cluster the event's pseudo-particles.

        Args:
            particles: Clustering input, may be empty

        Returns:
            Jets sorted by descending pt, empty list for empty input
        """
        if not particles:
            return []

        inputs = []
        for particle in particles:
            pseudojet = fastjet.PseudoJet(particle.px, particle.py, particle.pz, particle.e)
            pseudojet.set_user_index(particle.index)
            inputs.append(pseudojet)

        sequence = fastjet.ClusterSequenceArea(inputs, self.jet_definition, self.area_definition)

        # Everything is read out while the cluster sequence is alive
        jets = []
        for pseudojet in fastjet.sorted_by_pt(sequence.inclusive_jets()):
            constituents = tuple(
                c.user_index() for c in pseudojet.constituents() if c.user_index() >= 0
            )
            if not constituents:
                continue

            area_vector = pseudojet.area_4vector()
            jets.append(Jet(
                px=pseudojet.px(),
                py=pseudojet.py(),
                pz=pseudojet.pz(),
                e=pseudojet.E(),
                area=max(pseudojet.area(), 0.0),
                area_4vector=(area_vector.px(), area_vector.py(), area_vector.pz(), area_vector.E()),
                constituents=constituents,
            ))

        self.logger.debug(f"Clustered {len(particles)} particles into {len(jets)} jets")
        return jets
