"""
Recommendation Tests

recommend(): unseen/seen mix, recent exclusion, backfill, uniqueness, stable ties.
initial_feed(): cold-start popularity ordering with creator spread.

Run:
----
    pytest tests/test_recommend.py -v
"""

from feedrank import (
    FeedConfig,
    InteractionRecord,
    PreferenceProfile,
    ScoringEngine,
    initial_feed,
    rank_candidates,
    recommend,
)

EMPTY = PreferenceProfile()


def _ids(items):
    return [it.id for it in items]


class TestRecommend:
    """Personalized ranking."""

    def test_returns_count_unique_items(self, catalog):
        result = recommend(catalog, EMPTY, [], [], 10)
        assert len(result) == 10
        assert len(set(_ids(result))) == 10

    def test_small_catalog_returns_whole_catalog(self, catalog):
        result = recommend(catalog[:8], EMPTY, [], [], 10)
        assert len(result) == 8
        assert set(_ids(result)) == set(_ids(catalog[:8]))

    def test_zero_count(self, catalog):
        assert recommend(catalog, EMPTY, [], [], 0) == []

    def test_duplicate_catalog_ids_collapse(self, catalog):
        doubled = catalog[:6] + catalog[:6]
        result = recommend(doubled, EMPTY, [], [], 10)
        assert sorted(_ids(result)) == sorted(_ids(catalog[:6]))

    def test_recently_shown_tail_is_excluded_from_ranking(self, catalog):
        recent = catalog[-7:]
        tail_ids = set(_ids(recent[-5:]))
        # no interactions: 4 ranked unseen picks, the 5th slot is catalog-order backfill
        result = recommend(catalog, EMPTY, [], recent, 5)
        assert len(result) == 5
        assert not tail_ids & set(_ids(result[:4]))

    def test_unseen_seen_mix(self, catalog):
        seen = catalog[:20]
        interactions = [InteractionRecord(item_id=it.id, completion_rate=60) for it in seen]
        seen_ids = set(_ids(seen))

        result = recommend(catalog, EMPTY, interactions, [], 10)

        assert len(result) == 10
        assert sum(1 for it in result if it.id in seen_ids) == 2
        assert sum(1 for it in result if it.id not in seen_ids) == 8

    def test_result_sorted_by_score(self, catalog):
        # all unseen: no catalog-order backfill at the tail
        config = FeedConfig(unseen_share=1.0)
        ranked = rank_candidates(catalog, EMPTY, [], [], 10, config)
        scores = [s.score for s in ranked]
        assert scores == sorted(scores, reverse=True)
        assert [s.item.id for s in ScoringEngine(config).rank(catalog, EMPTY, [], [], 10)] == [s.item.id for s in ranked]

    def test_ties_keep_catalog_order(self, make_item):
        flat = [make_item(name, creator=name) for name in ["e", "a", "d", "b", "c"]]
        assert _ids(recommend(flat, EMPTY, [], [], 5)) == ["e", "a", "d", "b", "c"]
        assert _ids(recommend(flat, EMPTY, [], [], 5)) == _ids(recommend(flat, EMPTY, [], [], 5))

    def test_skipped_items_sink(self, catalog):
        best = recommend(catalog, EMPTY, [], [], 1)[0]
        interactions = [InteractionRecord(item_id=best.id, completion_rate=10)]
        result = recommend(catalog, EMPTY, interactions, [], 5)
        assert result[0].id != best.id

    def test_does_not_mutate_inputs(self, catalog):
        prefs = PreferenceProfile(favorite_creators={"c1"})
        interactions = [InteractionRecord(item_id="v1", completion_rate=90)]
        before = [it.model_copy(deep=True) for it in catalog]
        recommend(catalog, prefs, interactions, catalog[:3], 10)
        assert catalog == before
        assert prefs.favorite_creators == {"c1"}
        assert len(interactions) == 1


class TestInitialFeed:
    """Cold-start feed."""

    def test_deterministic(self, catalog):
        assert _ids(initial_feed(catalog, 20)) == _ids(initial_feed(catalog, 20))

    def test_spreads_creators_then_relaxes(self, make_item):
        items = [
            make_item("a1", creator="c1", shares=200),
            make_item("b1", creator="c2", shares=190),
            make_item("d1", creator="c3", shares=180),
            make_item("a2", creator="c1", shares=170),
            make_item("a3", creator="c1", shares=160),
            make_item("e1", creator="c4", shares=10),
        ]
        # more than half filled after d1, so a2 may repeat creator c1
        assert _ids(initial_feed(items, 4)) == ["a1", "b1", "d1", "a2"]

    def test_skips_repeated_creator_early(self, make_item):
        items = [
            make_item("a1", creator="c1", shares=200),
            make_item("a2", creator="c1", shares=150),
            make_item("a3", creator="c1", shares=120),
            make_item("b1", creator="c2", shares=100),
            make_item("d1", creator="c3", shares=50),
            make_item("e1", creator="c4", shares=10),
        ]
        assert _ids(initial_feed(items, 4)) == ["a1", "b1", "d1", "e1"]

    def test_backfills_in_score_order(self, make_item):
        items = [
            make_item("a1", creator="c1", shares=200),
            make_item("a2", creator="c1", shares=150),
            make_item("a3", creator="c1", shares=120),
            make_item("b1", creator="c2", shares=100),
        ]
        assert _ids(initial_feed(items, 5)) == ["a1", "b1", "a2", "a3"]

    def test_count_bounds(self, catalog):
        assert initial_feed(catalog, 0) == []
        assert len(initial_feed(catalog, 100)) == len(catalog)
