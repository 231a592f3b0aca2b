"""Generate the vocabulary names similar to a query name.

With clusters, the query is scored against every cluster representative and
only clusters scoring at least the cluster threshold are searched; when none
qualifies, the single closest cluster is searched instead. Without clusters
every vocabulary name is scored.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import structlog

from .clusters import Cluster
from .features import Codes, FeaturesGenerator
from .scoring import FeatureScorer

if TYPE_CHECKING:
    from .engine import NameEngine

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NameScore:
    name: str
    score: float

    def sort_key(self) -> tuple[float, str]:
        return (-self.score, self.name)


class SimilarNameGenerator:
    def __init__(
        self,
        features: FeaturesGenerator,
        scorer: FeatureScorer,
        clusters: Sequence[Cluster],
        *,
        classifier_threshold: float,
        cluster_threshold: float,
        use_clusters: bool = True,
    ) -> None:
        self.features = features
        self.scorer = scorer
        self.use_clusters = use_clusters
        self.classifier_threshold = classifier_threshold
        self.cluster_threshold = cluster_threshold
        self.clusters: tuple[Cluster, ...] = tuple(clusters)

        # Codes are computed once up front; the vocabulary is scanned for every query
        if use_clusters:
            self._cluster_codes: tuple[Codes, ...] = tuple(
                features.get_codes(c.representative) for c in self.clusters
            )
            self.vocabulary: tuple[str, ...] = ()
            self._vocabulary_codes: tuple[Codes, ...] = ()
        else:
            self._cluster_codes = ()
            self.vocabulary = tuple(name for c in self.clusters for name in c.names())
            self._vocabulary_codes = tuple(features.get_codes(name) for name in self.vocabulary)

    @classmethod
    def from_engine(cls, engine: "NameEngine", clusters: Sequence[Cluster], use_clusters: bool = True) -> "SimilarNameGenerator":
        type_settings = engine.settings.for_type(engine.name_type)
        return cls(
            engine.features,
            engine.scorer,
            clusters,
            classifier_threshold=type_settings.classifier_threshold,
            cluster_threshold=type_settings.cluster_threshold,
            use_clusters=use_clusters,
        )

    def _score(self, name: str, codes: Codes, other: str, other_codes: Codes) -> float:
        return self.scorer.score(self.features.set_features(name, codes, other, other_codes))

    def _test_name(self, name: str, codes: Codes, candidate: str, candidate_codes: Codes | None,
                   found: dict[str, float], threshold: float) -> None:
        if candidate == name:
            return
        if candidate_codes is None:
            candidate_codes = self.features.get_codes(candidate)
        score = self._score(name, codes, candidate, candidate_codes)
        if score >= threshold and score > found.get(candidate, float("-inf")):
            found[candidate] = score

    def _test_cluster(self, name: str, codes: Codes, index: int, found: dict[str, float], threshold: float) -> None:
        cluster = self.clusters[index]
        self._test_name(name, codes, cluster.representative, self._cluster_codes[index], found, threshold)
        for member in cluster.members:
            self._test_name(name, codes, member, None, found, threshold)

    def generate_scored(
        self,
        name: str,
        classifier_threshold: float | None = None,
        cluster_threshold: float | None = None,
        max_names: int | None = None,
    ) -> list[NameScore]:
        """Similar names with their scores, best first (ties by name)."""
        if max_names is not None and max_names < 0:
            raise ValueError("max_names must be >= 0")
        if classifier_threshold is None:
            classifier_threshold = self.classifier_threshold
        if cluster_threshold is None:
            cluster_threshold = self.cluster_threshold

        codes = self.features.get_codes(name)
        found: dict[str, float] = {}

        if self.use_clusters:
            closest = None
            closest_score = float("-inf")
            tested = 0
            for i, cluster in enumerate(self.clusters):
                score = self._score(name, codes, cluster.representative, self._cluster_codes[i])
                if score > closest_score:
                    closest, closest_score = i, score
                if score >= cluster_threshold:
                    self._test_cluster(name, codes, i, found, classifier_threshold)
                    tested += 1
            if tested == 0 and closest is not None:
                self._test_cluster(name, codes, closest, found, classifier_threshold)
                tested = 1
            logger.debug("generator.clusters_tested", name=name, tested=tested, clusters=len(self.clusters))
        else:
            for other, other_codes in zip(self.vocabulary, self._vocabulary_codes):
                self._test_name(name, codes, other, other_codes, found, classifier_threshold)

        results = sorted((NameScore(n, s) for n, s in found.items()), key=NameScore.sort_key)
        if max_names is not None:
            results = results[:max_names]
        return results

    def generate(
        self,
        name: str,
        classifier_threshold: float | None = None,
        cluster_threshold: float | None = None,
        max_names: int | None = None,
    ) -> list[str]:
        return [ns.name for ns in self.generate_scored(name, classifier_threshold, cluster_threshold, max_names)]
