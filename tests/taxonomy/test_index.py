"""Tests for TaxonomyIndex tree, path and neighbour lookups."""

import pytest

from shared.types import IconName
from taxonomy import (
    Breadcrumb,
    TaxonomyIndex,
    TaxonomyIntegrityError,
    TopicLink,
    normalize_base_path,
)


class TestBuild:
    """Tests for index construction."""

    def test_category_map_has_every_id(self, index, categories) -> None:
        assert set(index.category_map) == {c.id for c in categories}
        assert len(index) == 6

    def test_children_sorted_by_order(self, index) -> None:
        assert [c.id for c in index.children_of(None)] == ["foundations", "infrastructure"]
        assert [c.id for c in index.children_of("foundations")] == [
            "speech-recognition",
            "text-to-speech",
        ]

    def test_equal_order_keeps_source_order(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("b", order=1),
            make_category("a", order=1),
            make_category("c", order=0),
        ])
        assert [c.id for c in index.roots()] == ["c", "b", "a"]

    def test_duplicate_id_last_write_wins(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("x", title="First"),
            make_category("x", title="Second"),
        ])
        assert index.get("x").title == "Second"

    def test_empty_taxonomy(self) -> None:
        index = TaxonomyIndex([])
        assert index.navigation_tree() == []
        assert index.all_topic_slugs() == []
        assert index.topic_metadata(["anything"]) is None


class TestBuildHref:
    """Tests for bottom-up href construction."""

    def test_root_href(self, index) -> None:
        assert index.build_href(index.get("foundations")) == "/topics/foundations"

    def test_nested_href_follows_slugs(self, index) -> None:
        # Slug differs from id for the streaming node
        href = index.build_href(index.get("asr-streaming"))
        assert href == "/topics/foundations/speech-recognition/streaming"

    def test_custom_base_path(self, categories) -> None:
        index = TaxonomyIndex(categories, base_path="/docs/")
        assert index.build_href(index.get("telephony")) == "/docs/infrastructure/telephony"

    def test_root_base_path(self, categories) -> None:
        index = TaxonomyIndex(categories, base_path="/")
        assert index.build_href(index.get("foundations")) == "/foundations"

    @pytest.mark.parametrize(
        "raw, expected",
        [("topics", "/topics"), ("/docs/", "/docs"), ("/", ""), ("", "")],
    )
    def test_normalize_base_path(self, raw, expected) -> None:
        assert normalize_base_path(raw) == expected

    def test_orphan_is_treated_as_root(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("root"),
            make_category("orphan", parent_id="missing"),
        ])
        assert index.build_href(index.get("orphan")) == "/topics/orphan"

    def test_cycle_fails_the_build(self, make_category) -> None:
        with pytest.raises(TaxonomyIntegrityError) as exc_info:
            TaxonomyIndex([
                make_category("root"),
                make_category("a", parent_id="b"),
                make_category("b", parent_id="a"),
            ])
        assert exc_info.value.category_id == "a"

    def test_unreferenced_self_parent_fails_the_build(self, categories, make_category) -> None:
        # Nothing links to the looping node, but the build still rejects it
        with pytest.raises(TaxonomyIntegrityError) as exc_info:
            TaxonomyIndex([*categories, make_category("loop", parent_id="loop")])
        assert exc_info.value.category_id == "loop"


class TestNavigationTree:
    """Tests for the sidebar tree."""

    def test_roots_in_order(self, index) -> None:
        tree = index.navigation_tree()
        assert [n.title for n in tree] == ["Foundations", "Infrastructure"]
        assert tree[0].icon is IconName.layers

    def test_nested_children_and_hrefs(self, index) -> None:
        foundations = index.navigation_tree()[0]
        assert [c.title for c in foundations.children] == ["Speech Recognition", "Text to Speech"]
        streaming = foundations.children[0].children[0]
        assert streaming.title == "Streaming ASR"
        assert streaming.href == "/topics/foundations/speech-recognition/streaming"
        assert streaming.children == []

    def test_tree_hrefs_match_build_href(self, index) -> None:
        def walk(nodes):
            for node in nodes:
                yield node
                yield from walk(node.children)

        hrefs = {node.href for node in walk(index.navigation_tree())}
        assert hrefs == {index.build_href(c) for c in index.categories}

    def test_sibling_order_beats_source_order(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("p"),
            make_category("a", parent_id="p", order=2),
            make_category("b", parent_id="p", order=1),
        ])
        assert [n.title for n in index.navigation_tree()[0].children] == ["B", "A"]

    def test_orphan_listed_as_root(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("root", order=1),
            make_category("orphan", parent_id="gone", order=0),
        ])
        assert [n.href for n in index.navigation_tree()] == ["/topics/orphan", "/topics/root"]


class TestTopicMetadata:
    """Tests for slug path resolution."""

    def test_resolves_nested_path(self, index) -> None:
        category = index.topic_metadata(["foundations", "speech-recognition", "streaming"])
        assert category is not None
        assert category.id == "asr-streaming"

    def test_empty_path_is_none(self, index) -> None:
        assert index.topic_metadata([]) is None

    def test_unknown_segment_is_none(self, index) -> None:
        assert index.topic_metadata(["foundations", "nope"]) is None

    def test_segment_must_match_under_its_parent(self, index) -> None:
        # telephony exists, but not under foundations
        assert index.topic_metadata(["foundations", "telephony"]) is None

    def test_round_trip_with_build_href(self, index) -> None:
        for slug_path in index.all_topic_slugs():
            category = index.topic_metadata(slug_path)
            assert index.build_href(category) == "/topics/" + "/".join(slug_path)

    def test_duplicate_sibling_slug_first_wins(self, make_category) -> None:
        index = TaxonomyIndex([
            make_category("one", slug="same", order=1),
            make_category("two", slug="same", order=0),
        ])
        assert index.topic_metadata(["same"]).id == "two"

    def test_orphan_resolves_as_root(self, make_category) -> None:
        index = TaxonomyIndex([make_category("orphan", parent_id="gone")])
        assert index.topic_metadata(["orphan"]).id == "orphan"


class TestAllTopicSlugs:
    """Tests for the global topic order."""

    def test_source_order_with_ancestors(self, index) -> None:
        assert index.all_topic_slugs() == [
            ["infrastructure"],
            ["foundations"],
            ["foundations", "text-to-speech"],
            ["foundations", "speech-recognition"],
            ["foundations", "speech-recognition", "streaming"],
            ["infrastructure", "telephony"],
        ]


class TestPrevNext:
    """Tests for previous/next links."""

    def test_first_has_no_prev(self, index) -> None:
        result = index.prev_next(["infrastructure"])
        assert result.prev is None
        assert result.next == TopicLink(title="Foundations", href="/topics/foundations")

    def test_last_has_no_next(self, index) -> None:
        result = index.prev_next(["infrastructure", "telephony"])
        assert result.next is None
        assert result.prev.href == "/topics/foundations/speech-recognition/streaming"

    def test_follows_source_order_not_tree_order(self, index) -> None:
        result = index.prev_next(["foundations"])
        assert result.prev.title == "Infrastructure"
        assert result.next.title == "Text to Speech"

    def test_unknown_path_has_no_neighbours(self, index) -> None:
        result = index.prev_next(["does", "not", "exist"])
        assert result.prev is None
        assert result.next is None


class TestBreadcrumbs:
    """Tests for breadcrumb chains."""

    def test_chain_root_to_current(self, index) -> None:
        crumbs = index.breadcrumbs(index.get("asr-streaming"))
        assert crumbs == [
            Breadcrumb(label="Foundations", href="/topics/foundations"),
            Breadcrumb(label="Speech Recognition", href="/topics/foundations/speech-recognition"),
            Breadcrumb(label="Streaming ASR", href=None),
        ]

    def test_root_has_single_crumb(self, index) -> None:
        assert index.breadcrumbs(index.get("foundations")) == [
            Breadcrumb(label="Foundations", href=None)
        ]


class TestAncestry:
    """Tests for parent and root lookups."""

    def test_parent_title(self, index) -> None:
        assert index.parent_title(index.get("telephony")) == "Infrastructure"
        assert index.parent_title(index.get("foundations")) is None

    def test_root_of(self, index) -> None:
        assert index.root_of(index.get("asr-streaming")).id == "foundations"

    def test_search_items_carry_href_and_parent(self, index) -> None:
        items = {item.category.id: item for item in index.search_items()}
        assert items["telephony"].href == "/topics/infrastructure/telephony"
        assert items["telephony"].parent_title == "Infrastructure"
        assert items["foundations"].parent_title is None
