from featureEngineering.textPreprocessing import extract_hashtags, find_keywords, normalize_hashtags
from featureEngineering.userInterests import derive_interests
from tests.conftest import make_item


class TestTextPreprocessing:
    def test_hashtags_are_lowercased_and_unique(self):
        assert extract_hashtags("Loving #Python and #python and #AI!") == ['python', 'ai']

    def test_normalize_hashtags(self):
        assert normalize_hashtags(['#News', 'news', ' Tech ', '']) == ['news', 'tech']

    def test_find_keywords(self):
        assert find_keywords("Total SCAM, fake!", ['scam', 'fake', 'bot']) == ['scam', 'fake']
        assert find_keywords("", ['scam']) == []


class TestDeriveInterests:
    def test_most_frequent_first(self):
        items = [
            make_item('a', hours_ago=5, hashtags={'python', 'rust'}),
            make_item('b', hours_ago=4, hashtags={'python'}),
            make_item('c', hours_ago=3, hashtags={'go'}),
        ]
        assert derive_interests(items) == ['python', 'go', 'rust']

    def test_falls_back_to_text_hashtags(self):
        items = [make_item('a', hours_ago=1, text="weekend #Hiking trip")]
        assert derive_interests(items) == ['hiking']

    def test_capped(self):
        items = [make_item(f'p{i}', hours_ago=i, hashtags={f'tag{i}'}) for i in range(30)]
        interests = derive_interests(items)
        assert len(interests) == 20
        assert interests[0] == 'tag0'

    def test_empty(self):
        assert derive_interests([]) == []
