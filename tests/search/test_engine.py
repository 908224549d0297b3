import copy
from types import SimpleNamespace

import pytest

from fuzzrank.search.engine import RankingConfig, RankingEngine, search, tokenize
from fuzzrank.search.types import Record


def titles(response) -> list[str]:
    return [r["title"] for r in response.results]


class TestTokenize:
    def test_lowercases_and_splits_on_whitespace_runs(self):
        assert tokenize("  Red   BICYCLE \t lamp\n") == ["red", "bicycle", "lamp"]

    def test_blank(self):
        assert tokenize("") == []
        assert tokenize("   \t ") == []

    def test_none_is_empty(self):
        assert tokenize(None) == []

    def test_non_string_coerced(self):
        assert tokenize(42) == ["42"]


class TestEmptyQuery:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None])
    def test_passthrough_in_original_order(self, listings, query):
        response = search(listings, query)

        assert response.total_results == len(listings)
        assert response.results == listings
        assert all(a is b for a, b in zip(response.results, listings))

    def test_passthrough_ignores_threshold(self, listings):
        response = search(listings, "", threshold=1.0)
        assert response.total_results == len(listings)

    def test_empty_records(self):
        response = search([], "bicycle")
        assert response.results == []
        assert response.total_results == 0


class TestRanking:
    def test_dissimilar_query_yields_nothing(self):
        response = search([{"title": "Bicycle"}], "xyz123", threshold=0.6)
        assert response.total_results == 0
        assert response.results == []

    def test_exact_and_substring_beat_fuzzy(self):
        records = [{"title": "Red Bicycle"}, {"title": "Bicycle"}, {"title": "Bike"}]

        response = search(records, "bicycle")

        assert titles(response) == ["Red Bicycle", "Bicycle", "Bike"]

    def test_fuzzy_only_record_can_fall_below_threshold(self):
        records = [{"title": "Red Bicycle"}, {"title": "Bicycle"}, {"title": "Bike"}]

        response = search(records, "bicycle", threshold=0.7)

        assert titles(response) == ["Red Bicycle", "Bicycle"]

    def test_returns_original_objects(self, listings):
        response = search(listings, "desk")

        assert response.total_results == 1
        assert response.results[0] is listings[3]

    def test_records_not_mutated(self, listings):
        before = copy.deepcopy(listings)
        search(listings, "red bicycle")
        assert listings == before

    def test_total_matches_result_length(self, listings):
        response = search(listings, "sports")
        assert response.total_results == len(response.results) == 3

    def test_no_duplicates(self, listings):
        response = search(listings, "bike bicycle", threshold=0.0)
        ids = [r["id"] for r in response.results]
        assert len(ids) == len(set(ids)) == len(listings)

    def test_threshold_is_inclusive(self):
        engine = RankingEngine()
        record = Record.from_payload({"title": "Bicycle"})
        score = engine.score_record(record, ["bike"])

        assert search([{"title": "Bicycle"}], "bike", threshold=score).total_results == 1


class TestStability:
    def test_ties_keep_input_order(self):
        records = [
            {"id": "a", "title": "Lamp"},
            {"id": "b", "title": "Lamp"},
            {"id": "c", "title": "Lamp"},
        ]

        forward = search(records, "lamp")
        backward = search(list(reversed(records)), "lamp")

        assert [r["id"] for r in forward.results] == ["a", "b", "c"]
        assert [r["id"] for r in backward.results] == ["c", "b", "a"]

    def test_deterministic(self, listings):
        engine = RankingEngine()
        first = engine.search(listings, "red bike", threshold=0.0)
        second = engine.search(listings, "red bike", threshold=0.0)

        assert [r["id"] for r in first.results] == [r["id"] for r in second.results]

        words = tokenize("red bike")
        first_scores = [engine.score_record(Record.from_payload(r), words) for r in listings]
        second_scores = [engine.score_record(Record.from_payload(r), words) for r in listings]
        assert first_scores == second_scores


class TestScoring:
    def test_exact_title_match_saturates(self):
        engine = RankingEngine()
        assert engine.score_record(Record.from_payload({"title": "Bicycle"}), ["bicycle"]) == 1.0

    def test_multi_word_is_normalized(self):
        engine = RankingEngine()
        record = Record.from_payload({"title": "Bicycle"})

        single = engine.score_record(record, ["bicycle"])
        double = engine.score_record(record, ["red", "bicycle"])

        assert single == 1.0
        # Cap hits 1.0 after "bicycle", then divided by two words
        assert double == 0.5
        assert double <= single

    def test_running_cap_applies_per_word(self):
        engine = RankingEngine()
        record = Record.from_payload({"title": "Red Bicycle"})

        # Both words are substrings of the title: 1.35 each, capped to 1.0 before dividing
        assert engine.score_record(record, ["red", "bicycle"]) == 0.5

    def test_fields_are_not_summed(self):
        engine = RankingEngine()
        record = Record.from_payload({"title": "lump", "description": "lump", "category": "lump"})

        assert engine.score_word(record, "lamp") == pytest.approx(0.75 * 1.5)

    def test_weight_ordering(self):
        engine = RankingEngine()
        in_title = Record.from_payload({"title": "Lump"})
        in_category = Record.from_payload({"category": "Lump"})
        in_description = Record.from_payload({"description": "Lump"})

        title_score = engine.score_record(in_title, ["lamp"])
        category_score = engine.score_record(in_category, ["lamp"])
        description_score = engine.score_record(in_description, ["lamp"])

        assert title_score > category_score > description_score
        assert category_score == pytest.approx(0.9)
        assert description_score == pytest.approx(0.75)

    def test_weight_ordering_in_results(self):
        records = [
            {"id": "description", "description": "Lump"},
            {"id": "category", "category": "Lump"},
            {"id": "title", "title": "Lump"},
        ]

        response = search(records, "lamp", threshold=0.0)

        assert [r["id"] for r in response.results] == ["title", "category", "description"]

    def test_scores_bounded(self, listings):
        engine = RankingEngine()
        for query in ("bicycle", "red bicycle", "sports desk lamp", "zzz"):
            words = tokenize(query)
            for payload in listings:
                assert 0.0 <= engine.score_record(Record.from_payload(payload), words) <= 1.0


class TestConfiguration:
    def test_custom_weights(self):
        engine = RankingEngine(RankingConfig(title_weight=0.5))
        response = engine.search([{"title": "Bicycle"}], "bicycle")
        assert response.total_results == 0

    def test_config_threshold_used_by_default(self):
        records = [{"title": "Bicycle"}, {"title": "Bike"}]
        strict = RankingEngine(RankingConfig(threshold=0.9))

        assert titles(strict.search(records, "bicycle")) == ["Bicycle"]

    def test_call_threshold_overrides_config(self):
        records = [{"title": "Bicycle"}, {"title": "Bike"}]
        strict = RankingEngine(RankingConfig(threshold=0.9))

        assert titles(strict.search(records, "bicycle", threshold=0.5)) == ["Bicycle", "Bike"]

    def test_module_search_falls_back_to_config_threshold(self):
        records = [{"title": "Bicycle"}, {"title": "Bike"}]

        assert titles(search(records, "bicycle", config=RankingConfig(threshold=0.9))) == ["Bicycle"]
        assert titles(search(records, "bicycle")) == ["Bicycle", "Bike"]

    def test_module_search_accepts_config(self):
        response = search([{"category": "Lump"}], "lamp", config=RankingConfig(category_weight=1.0))
        assert response.total_results == 1
        assert search([{"category": "Lump"}], "lamp", threshold=0.8).total_results == 1
        assert search(
            [{"category": "Lump"}], "lamp", threshold=0.8, config=RankingConfig(category_weight=1.0)
        ).total_results == 0


class TestMalformedRecords:
    def test_missing_fields_do_not_raise(self):
        response = search([{"id": 1}, {}, {"title": None, "description": None}], "bicycle")
        assert response.total_results == 0

    def test_non_string_fields_coerced(self):
        response = search([{"title": 1984}], "1984")
        assert response.total_results == 1

    def test_attribute_payloads(self):
        item = SimpleNamespace(id=7, title="Oak Desk", description="", category="Furniture")
        response = search([item], "desk")
        assert response.results == [item]

    def test_category_name_fallback(self):
        response = search([{"title": "Chair", "category_name": "Furniture"}], "furniture")
        assert response.total_results == 1
