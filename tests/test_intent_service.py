"""Tests for keyword intent detection and hint extraction."""

from aurabot.models.context import Category
from aurabot.services.intent_service import detect


class TestDetectCategories:
    def test_bitcoin_price_is_crypto_only(self):
        intent = detect("what's bitcoin price today?")
        assert intent.categories == {Category.CRYPTO}
        assert intent.coin_id == "bitcoin"

    def test_markets_and_weather(self):
        intent = detect("how are markets and weather today?")
        assert intent.categories == {Category.CRYPTO, Category.WEATHER}

    def test_small_talk_has_no_lookup(self):
        intent = detect("just chilling now")
        assert intent.categories == frozenset()
        assert not intent.needs_lookup

    def test_empty_utterance(self):
        assert not detect("").needs_lookup
        assert not detect("   ").needs_lookup

    def test_news_terms(self):
        assert Category.NEWS in detect("what's happening with tesla?").categories
        assert Category.NEWS in detect("any breaking news").categories
        assert Category.NEWS in detect("who won the game last night").categories

    def test_today_alone_is_not_news(self):
        assert detect("how was your day today").categories == frozenset()

    def test_ticker_word_boundaries(self):
        # "eth" inside "together" must not count as ethereum
        assert detect("let's hang out together").categories == frozenset()

    def test_sol_ticker_is_solana(self):
        intent = detect("sol looking spicy rn")
        assert intent.categories == {Category.CRYPTO}
        assert intent.coin_id == "solana"

    def test_all_three(self):
        intent = detect("bitcoin news and the weather in Paris")
        assert intent.categories == {Category.CRYPTO, Category.WEATHER, Category.NEWS}

    def test_idempotent(self):
        text = "is it raining in london and how is eth doing"
        assert detect(text) == detect(text)


class TestHints:
    def test_coin_alias(self):
        assert detect("eth price?").coin_id == "ethereum"
        assert detect("how much is doge").coin_id == "dogecoin"

    def test_generic_market_defaults_to_bitcoin(self):
        assert detect("how is the crypto market").coin_id == "bitcoin"

    def test_city_after_weather_word(self):
        assert detect("what's the weather in london today?").city == "London"
        assert detect("weather in new york").city == "New York"

    def test_city_defaults(self):
        assert detect("how's the weather?").city == "New York"

    def test_city_only_for_weather(self):
        assert detect("bitcoin price").city is None

    def test_search_query_strips_filler(self):
        intent = detect("what's happening with the new iphone?")
        assert intent.search_query == "the new iphone"

    def test_search_query_capped(self):
        intent = detect("latest news " + "x" * 300)
        assert len(intent.search_query) <= 100
