"""Tests for cluster parsing and similar-name generation."""
from __future__ import annotations

from pathlib import Path

import pytest

from gps_names.clusters import Cluster, parse_cluster_line, read_clusters
from gps_names.exceptions import MalformedRecordError, ResourceError
from gps_names.generator import NameScore, SimilarNameGenerator


class NegativeLevenshteinScorer:
    """Score is minus the spelling edit distance; 0 for identical names."""

    def score(self, features):
        return -features.levenshtein


CLUSTERS = [
    Cluster("ann", ("anne", "anna", "annie")),
    Cluster("john", ("jon", "johan", "jonny")),
    Cluster("mary", ("marie", "maria")),
]


def make_generator(engine, clusters=CLUSTERS, use_clusters=True):
    return SimilarNameGenerator(
        engine.features,
        NegativeLevenshteinScorer(),
        clusters,
        classifier_threshold=-1.0,
        cluster_threshold=-1.5,
        use_clusters=use_clusters,
    )


class TestClusters:
    """Tests for cluster file parsing."""

    def test_parse(self):
        cluster = parse_cluster_line("ann: anne, anna annie\n")
        assert cluster == Cluster("ann", ("anne", "anna", "annie"))
        assert list(cluster.names()) == ["ann", "anne", "anna", "annie"]

    def test_parse_representative_only(self):
        assert parse_cluster_line("ann") == Cluster("ann")

    def test_parse_malformed(self):
        with pytest.raises(MalformedRecordError):
            parse_cluster_line(": anne")

    def test_read(self, tmp_path: Path):
        path = tmp_path / "clusters.txt"
        path.write_text("ann: anne\n\n: orphan\njohn: jon\n", encoding="utf-8")
        clusters = read_clusters(path)
        assert [c.representative for c in clusters] == ["ann", "john"]

    def test_read_missing(self, tmp_path: Path):
        with pytest.raises(ResourceError):
            read_clusters(tmp_path / "missing.txt")


class TestSimilarNameGenerator:
    """Tests for SimilarNameGenerator."""

    def test_searches_qualifying_clusters(self, engine):
        assert make_generator(engine).generate("jon") == ["john"]

    def test_query_never_returned(self, engine):
        results = make_generator(engine).generate("anne", classifier_threshold=-10.0)
        assert "anne" not in results
        assert "ann" in results

    def test_falls_back_to_closest_cluster(self, engine):
        generator = make_generator(engine)
        # no representative reaches the cluster threshold, so only mary's cluster is searched
        assert generator.generate("marx", cluster_threshold=5.0) == ["mary"]
        assert generator.generate("marx", classifier_threshold=-2.0, cluster_threshold=5.0) == [
            "mary", "maria", "marie",
        ]

    def test_sorted_by_score_then_name(self, engine):
        scored = make_generator(engine).generate_scored("ann", classifier_threshold=-2.0)
        assert scored == sorted(scored, key=NameScore.sort_key)
        assert [ns.name for ns in scored] == ["anna", "anne", "annie"]
        assert scored[0].score == -1.0

    def test_max_names(self, engine):
        generator = make_generator(engine)
        assert generator.generate("ann", classifier_threshold=-2.0, max_names=1) == ["anna"]

    def test_negative_max_names_rejected(self, engine):
        with pytest.raises(ValueError):
            make_generator(engine).generate("ann", max_names=-1)

    def test_zero_max_names(self, engine):
        assert make_generator(engine).generate("ann", classifier_threshold=-2.0, max_names=0) == []

    def test_duplicates_removed(self, engine):
        clusters = [Cluster("ann", ("anna",)), Cluster("anne", ("anna",))]
        generator = make_generator(engine, clusters)
        assert generator.generate("ann", cluster_threshold=-5.0) == ["anna", "anne"]

    def test_idempotent(self, engine):
        generator = make_generator(engine)
        assert generator.generate_scored("jon") == generator.generate_scored("jon")

    def test_without_clusters(self, engine):
        generator = make_generator(engine, use_clusters=False)
        assert generator.vocabulary[:4] == ("ann", "anne", "anna", "annie")
        assert generator.generate("jon") == ["john"]
        assert generator.generate("mari", classifier_threshold=-1.0) == ["maria", "marie", "mary"]

    def test_empty_vocabulary(self, engine):
        assert make_generator(engine, clusters=[]).generate("ann") == []

    def test_from_engine_uses_configured_thresholds(self, engine):
        generator = SimilarNameGenerator.from_engine(engine, CLUSTERS)
        assert generator.classifier_threshold == 2.3
        assert generator.cluster_threshold == -0.75
