from unittest.mock import MagicMock

import pytest

from ranking.errors import UpstreamQueryFailure
from ranking.featureProjector import project_features
from ranking.popularityRanker import PopularityRanker, popularity_score, window_hours
from tests.conftest import make_account, make_item


def test_popularity_formula():
    features = project_features(make_item('p', likes=2, shares=1, replies=3, views=10))
    assert popularity_score(features) == pytest.approx(2 * 3 + 1 * 5 + 3 * 2 + 10 * 0.1)


@pytest.mark.parametrize("window,hours", [('1h', 1), ('24h', 24), ('7d', 168)])
def test_window_resolution(window, hours):
    assert window_hours(window) == hours


def test_unknown_window_rejected():
    with pytest.raises(ValueError):
        window_hours('30d')


class TestGetPopular:
    @pytest.fixture
    def ranked_store(self, store):
        store.add_account(make_account('author'))
        store.add_content(make_item('hour-old-hit', hours_ago=0.5, likes=10))
        store.add_content(make_item('day-old-hit', hours_ago=12, likes=40))
        store.add_content(make_item('week-old-hit', hours_ago=100, likes=90))
        store.add_content(make_item('ancient', hours_ago=500, likes=1000))
        return store

    def test_windows_filter_by_age(self, ranked_store, clock):
        ranker = PopularityRanker(ranked_store, clock)
        assert [p['id'] for p in ranker.get_popular('1h')] == ['hour-old-hit']
        assert [p['id'] for p in ranker.get_popular('24h')] == ['day-old-hit', 'hour-old-hit']
        assert [p['id'] for p in ranker.get_popular('7d')] == ['week-old-hit', 'day-old-hit', 'hour-old-hit']

    def test_ties_go_to_newer_item(self, store, clock):
        store.add_content(make_item('older', hours_ago=5, likes=3))
        store.add_content(make_item('newer', hours_ago=2, likes=3))
        assert [p['id'] for p in PopularityRanker(store, clock).get_popular('24h')] == ['newer', 'older']

    def test_at_most_fifty(self, store, clock):
        for i in range(60):
            store.add_content(make_item(f'p{i}', hours_ago=1, likes=i))
        popular = PopularityRanker(store, clock).get_popular('24h')
        assert len(popular) == 50
        assert popular[0]['popularityScore'] == pytest.approx(59 * 3)

    def test_viewer_does_not_change_order(self, ranked_store, clock):
        ranker = PopularityRanker(ranked_store, clock)
        anonymous = [p['id'] for p in ranker.get_popular('7d')]
        personal = [p['id'] for p in ranker.get_popular('7d', viewer_id='author')]
        assert anonymous == personal

    def test_store_failure_propagates(self, clock):
        failing = MagicMock()
        failing.list_content_since.side_effect = UpstreamQueryFailure("down")
        with pytest.raises(UpstreamQueryFailure):
            PopularityRanker(failing, clock).get_popular('24h')
