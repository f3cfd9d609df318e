"""Tests for loading the taxonomy dataset."""

import json

import pytest

from shared.types import IconName
from taxonomy import (
    TaxonomyIntegrityError,
    TaxonomyLoadError,
    load_taxonomy,
    parse_categories,
)

RECORDS = [
    {
        "id": "foundations",
        "title": "Foundations",
        "slug": "foundations",
        "description": "Core concepts",
        "parentId": None,
        "order": 1,
        "tags": ["basics"],
        "icon": "layers",
    },
    {
        "id": "speech-recognition",
        "title": "Speech Recognition",
        "slug": "speech-recognition",
        "description": "ASR",
        "parentId": "foundations",
        "order": 1,
        "tags": ["asr"],
    },
]


class TestParseCategories:
    """Tests for parse_categories()."""

    def test_wrapped_records(self) -> None:
        categories = parse_categories({"categories": RECORDS})
        assert [c.id for c in categories] == ["foundations", "speech-recognition"]
        assert categories[1].parent_id == "foundations"
        assert categories[0].icon is IconName.layers

    def test_bare_list(self) -> None:
        assert len(parse_categories(RECORDS)) == 2

    def test_missing_optional_fields_get_defaults(self) -> None:
        [category] = parse_categories([{"id": "x", "title": "X", "slug": "x"}])
        assert category.parent_id is None
        assert category.order == 0
        assert category.tags == []
        assert category.display_icon is IconName.book_open

    def test_unknown_icon_rejected(self) -> None:
        record = dict(RECORDS[0], icon="rocket")
        with pytest.raises(TaxonomyLoadError):
            parse_categories([record])

    def test_missing_required_field_rejected(self) -> None:
        with pytest.raises(TaxonomyLoadError, match="Invalid taxonomy records"):
            parse_categories([{"id": "x", "title": "X"}])

    def test_wrong_shape_rejected(self) -> None:
        with pytest.raises(TaxonomyLoadError):
            parse_categories({"topics": RECORDS})


class TestLoadTaxonomy:
    """Tests for load_taxonomy()."""

    def test_loads_and_indexes(self, tmp_path) -> None:
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps({"categories": RECORDS}), encoding="utf-8")

        index = load_taxonomy(path)
        assert len(index) == 2
        assert index.build_href(index.get("speech-recognition")) == (
            "/topics/foundations/speech-recognition"
        )

    def test_base_path_passed_through(self, tmp_path) -> None:
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps(RECORDS), encoding="utf-8")

        index = load_taxonomy(path, base_path="/kb")
        assert index.navigation_tree()[0].href == "/kb/foundations"

    def test_cyclic_dataset_rejected_at_load(self, tmp_path) -> None:
        looping = dict(RECORDS[1], id="loop", slug="loop", parentId="loop")
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps({"categories": [*RECORDS, looping]}), encoding="utf-8")

        with pytest.raises(TaxonomyIntegrityError) as exc_info:
            load_taxonomy(path)
        assert exc_info.value.category_id == "loop"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(TaxonomyLoadError, match="Cannot read"):
            load_taxonomy(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "taxonomy.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TaxonomyLoadError, match="not valid JSON"):
            load_taxonomy(path)

    def test_bundled_dataset_is_consistent(self) -> None:
        """The shipped dataset loads and every topic path round-trips."""
        from pathlib import Path

        data_file = Path(__file__).parents[2] / "data" / "taxonomy.json"
        index = load_taxonomy(data_file)
        assert len(index) > 0
        for slug_path in index.all_topic_slugs():
            assert index.topic_metadata(slug_path) is not None
