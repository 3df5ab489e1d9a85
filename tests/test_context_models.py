"""Tests for the context bundle and the tagged provider records."""

import pytest
from pydantic import TypeAdapter, ValidationError

from aurabot.models.context import Category, ContextBundle, ContextRecord, ProviderResult, WeatherReport, ordered


class TestContextBundle:
    def test_empty_bundle(self):
        bundle = ContextBundle.from_records([])
        assert bundle.is_empty
        assert bundle.categories == []
        assert bundle.cross_reference is None

    def test_single_record_has_no_cross_reference(self, btc_quote):
        bundle = ContextBundle.from_records([btc_quote])
        assert bundle.categories == [Category.CRYPTO]
        assert bundle.cross_reference is None

    def test_cross_reference_in_canonical_order(self, btc_quote, london_weather, news_summary):
        bundle = ContextBundle.from_records([news_summary, london_weather, btc_quote])
        assert bundle.cross_reference == [Category.CRYPTO, Category.WEATHER, Category.NEWS]

    def test_rejects_unknown_records(self):
        with pytest.raises(TypeError):
            ContextBundle.from_records([{"kind": "sports"}])


class TestContextRecord:
    adapter = TypeAdapter(ContextRecord)

    def test_dispatches_on_kind(self):
        record = self.adapter.validate_python({
            "kind": "weather", "city": "Oslo", "temperature_c": -3, "description": "snow",
        })
        assert isinstance(record, WeatherReport)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "sports", "score": "3-1"})

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "crypto", "coin_id": "bitcoin"})


class TestProviderResult:
    def test_success_and_failure(self, btc_quote):
        assert ProviderResult.success(Category.CRYPTO, btc_quote).ok
        failed = ProviderResult.failure(Category.CRYPTO, "timeout")
        assert not failed.ok
        assert failed.error == "timeout"


def test_ordered():
    assert ordered({Category.NEWS, Category.CRYPTO}) == [Category.CRYPTO, Category.NEWS]
