from unittest.mock import MagicMock

import pytest

from ranking.errors import UpstreamQueryFailure
from ranking.trendingAnalyzer import TrendingAnalyzer, trend_score
from tests.conftest import make_item


class TestTrendScore:
    def test_formula(self):
        assert trend_score(3, 2, 9) == 3 * 2 * 10

    def test_zero_engagement_does_not_zero_the_score(self):
        assert trend_score(4, 2, 0) == 8

    def test_dominating_tag_scores_higher(self):
        assert trend_score(5, 3, 10) > trend_score(4, 2, 9)


class TestGetTrending:
    def test_groups_and_counts(self, store, clock):
        store.add_content(make_item('a', author_id='ann', hours_ago=1, likes=2, hashtags={'python'}))
        store.add_content(make_item('b', author_id='bob', hours_ago=2, shares=1, replies=1,
                                    hashtags={'python', 'rust'}))
        store.add_content(make_item('c', author_id='ann', hours_ago=3, hashtags={'python'}))

        trends = TrendingAnalyzer(store, clock).get_trending(24)

        assert trends[0] == {
            'hashtag': 'python',
            'postCount': 3,
            'uniqueAuthorCount': 2,
            'engagement': 4,
            'trendScore': 3 * 2 * 5,
        }
        assert trends[1]['hashtag'] == 'rust'
        assert trends[1]['trendScore'] == 1 * 1 * 3

    def test_window_excludes_older_items(self, store, clock):
        store.add_content(make_item('recent', hours_ago=2, hashtags={'fresh'}))
        store.add_content(make_item('old', hours_ago=30, hashtags={'stale'}))

        tags = [t['hashtag'] for t in TrendingAnalyzer(store, clock).get_trending(24)]
        assert tags == ['fresh']

    def test_untagged_items_ignored(self, store, clock):
        store.add_content(make_item('plain', hours_ago=1, likes=100))
        assert TrendingAnalyzer(store, clock).get_trending(24) == []

    def test_single_author_spam_loses_to_broad_topic(self, store, clock):
        for i in range(4):
            store.add_content(make_item(f'spam-{i}', author_id='bot', hours_ago=1, hashtags={'buynow'}))
        for i, author in enumerate(['a', 'b', 'c']):
            store.add_content(make_item(f'talk-{i}', author_id=author, hours_ago=1, hashtags={'election'}))

        trends = TrendingAnalyzer(store, clock).get_trending(24)
        assert [t['hashtag'] for t in trends] == ['election', 'buynow']

    def test_bounded_and_sorted(self, store, clock):
        for i in range(30):
            for j in range(i % 5 + 1):
                store.add_content(make_item(f'p-{i}-{j}', author_id=f'user-{j}', hours_ago=1,
                                            likes=i, hashtags={f'tag{i}'}))

        trends = TrendingAnalyzer(store, clock).get_trending(24)
        scores = [t['trendScore'] for t in trends]

        assert len(trends) == 20
        assert scores == sorted(scores, reverse=True)

    def test_rejects_non_positive_window(self, store, clock):
        with pytest.raises(ValueError):
            TrendingAnalyzer(store, clock).get_trending(0)

    def test_store_failure_propagates(self, clock):
        failing = MagicMock()
        failing.list_content_since.side_effect = UpstreamQueryFailure("down")
        with pytest.raises(UpstreamQueryFailure):
            TrendingAnalyzer(failing, clock).get_trending(24)
