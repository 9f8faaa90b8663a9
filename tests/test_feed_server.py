import base64
import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from ranking.errors import UpstreamQueryFailure
from server.feedServer import FeedServer, decode_viewer_id
from tests.conftest import make_account, make_item


def bearer(claims):
    """Unsigned bearer token carrying the given claims"""
    def segment(data):
        return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip('=')
    return f"Bearer {segment({'alg': 'none'})}.{segment(claims)}.signature"


class TestDecodeViewerId:
    def test_subject_claim(self):
        assert decode_viewer_id(bearer({'sub': 'ann'})) == 'ann'

    def test_issuer_fallback(self):
        assert decode_viewer_id(bearer({'iss': 'did:plc:ann'})) == 'did:plc:ann'

    @pytest.mark.parametrize("header", ["", "Basic abc", "Bearer not-a-jwt", "Bearer a.!!!.c"])
    def test_malformed(self, header):
        assert decode_viewer_id(header) is None

    @pytest.mark.parametrize("claims", ["abc", 42, ["sub", "ann"], None])
    def test_non_object_payload(self, claims):
        assert decode_viewer_id(bearer(claims)) is None


@pytest.fixture
def seeded_store(store):
    store.add_account(make_account('ann', following={'bob'}))
    store.add_account(make_account('bob', followers={'ann'}))
    store.add_account(make_account('cy', followers={'bob'}, interests=['python']))
    store.add_content(make_item('bob-post', author_id='bob', hours_ago=2, likes=1, hashtags={'python'}))
    store.add_content(make_item('cy-post', author_id='cy', hours_ago=30, hashtags={'python'}))
    return store


@pytest.fixture
def http(seeded_store, clock):
    return TestClient(FeedServer(store=seeded_store, clock=clock).app)


class TestFeedRoutes:
    def test_health(self, http):
        assert http.get("/").json()['status'] == 'healthy'

    def test_feed_requires_token(self, http):
        assert http.get("/feed").status_code == 401

    def test_feed(self, http):
        response = http.get("/feed", headers={'Authorization': bearer({'sub': 'ann'})})
        body = response.json()

        assert response.status_code == 200
        assert [item['id'] for item in body['feed']] == ['bob-post', 'cy-post']
        assert body['feed'][0]['algorithmData']['followingBoost'] == 10
        assert (body['limit'], body['offset']) == (20, 0)

    def test_feed_unknown_viewer(self, http):
        response = http.get("/feed", headers={'Authorization': bearer({'sub': 'ghost'})})
        assert response.status_code == 404

    def test_trending(self, http):
        trends = http.get("/trending", params={'window_hours': 48}).json()['trending']
        assert trends[0]['hashtag'] == 'python'
        assert trends[0]['postCount'] == 2

    def test_popular_bad_window(self, http):
        assert http.get("/popular", params={'window': '30d'}).status_code == 400

    def test_popular(self, http):
        body = http.get("/popular", params={'window': '24h'}).json()
        assert [post['id'] for post in body['popular']] == ['bob-post']

    def test_suggestions(self, http):
        response = http.get("/suggestions", headers={'Authorization': bearer({'sub': 'ann'})})
        assert [user['id'] for user in response.json()['suggestions']] == ['cy']

    def test_moderate(self, http):
        verdict = http.post("/moderate", json={'text': 'this looks like spam to me'}).json()
        assert verdict == {
            'isAppropriate': False,
            'flags': {'spam': True, 'offensive': False, 'hasAttachments': False},
            'confidenceScore': 0.9,
        }

    def test_feed_with_non_object_token_payload(self, http):
        assert http.get("/feed", headers={'Authorization': bearer("abc")}).status_code == 401

    @pytest.mark.parametrize("payload", [{'text': 123}, {'text': 'hello', 'attachments': 'x.png'}])
    def test_moderate_rejects_wrongly_typed_fields(self, http, payload):
        assert http.post("/moderate", json=payload).status_code == 400

    def test_post_analytics(self, http):
        assert http.get("/analytics/posts/bob-post").json()['likes'] == 1
        assert http.get("/analytics/posts/ghost").status_code == 404


class TestUpstreamFailures:
    def test_trending_outage_is_503(self, clock):
        failing = MagicMock()
        failing.list_content_since.side_effect = UpstreamQueryFailure("down")
        http = TestClient(FeedServer(store=failing, clock=clock).app)

        assert http.get("/trending").status_code == 503

    def test_health_reports_outage(self, clock):
        failing = MagicMock()
        failing.get_stats.side_effect = UpstreamQueryFailure("down")
        http = TestClient(FeedServer(store=failing, clock=clock).app)

        response = http.get("/health")
        assert response.status_code == 503
        assert response.json()['status'] == 'unhealthy'
