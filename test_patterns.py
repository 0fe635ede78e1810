"""
Tests for the semantic class classifier, the pattern miner and the scorer.
"""

import math

import pytest
from bs4 import BeautifulSoup

from schemasniff.miner import PatternMiner, cluster_elements
from schemasniff.schemas import AnalyzerOptions, CandidatePattern, PatternSample
from schemasniff.scorer import GATED_SCORE, PatternScorer, diversity_score, table_bonus
from schemasniff.utility_classes import (
    get_semantic_classes,
    is_semantic,
    is_utility_class,
    semantic_class_selector,
)


# ============================================================================
# Semantic class classifier
# ============================================================================

@pytest.mark.parametrize("name", [
    "flex", "container", "px-4", "-mt-2", "p-[20px]", "w-1/2", "h-[100px]",
    "hover:bg-blue-500", "md:flex", "text-gray-700", "bg-slate-100",
    "grid-cols-3", "col-span-2", "text-2xl", "font-bold", "a>b", "clearfix",
])
def test_utility_classes_are_filtered(name):
    assert is_utility_class(name)
    assert not is_semantic(name)


@pytest.mark.parametrize("name", [
    "product-card", "price_color", "item", "card", "title", "nav-link", "col-xs-6",
])
def test_semantic_classes_are_kept(name):
    assert is_semantic(name)


def test_get_semantic_classes_preserves_attribute_order():
    soup = BeautifulSoup('<div class="flex product-card px-4 featured"></div>', "html.parser")
    div = soup.div

    assert get_semantic_classes(div) == ["product-card", "featured"]
    assert semantic_class_selector(div) == ".product-card"


def test_semantic_class_selector_empty_without_semantic_classes():
    soup = BeautifulSoup('<span class="flex px-2"></span><b></b>', "html.parser")

    assert semantic_class_selector(soup.span) == ""
    assert semantic_class_selector(soup.b) == ""


# ============================================================================
# Clustering
# ============================================================================

def _elements(*class_attrs):
    html = "".join(f'<div class="{c}"></div>' for c in class_attrs)
    return BeautifulSoup(html, "html.parser").find_all("div")


def test_group_signature_only_shrinks():
    elements = _elements("card featured promo", "card featured", "card", "card other")

    sizes = [len(cluster_elements(elements[:k])[0].classes) for k in range(1, len(elements) + 1)]

    assert sizes == [3, 2, 1, 1]
    assert all(later <= earlier for earlier, later in zip(sizes, sizes[1:]))


def test_element_joins_group_with_largest_overlap():
    elements = _elements("alpha beta", "gamma delta", "alpha gamma delta")

    groups = cluster_elements(elements)

    assert len(groups) == 2
    assert groups[0].classes == ["alpha", "beta"]
    assert groups[1].classes == ["gamma", "delta"]
    assert len(groups[1].elements) == 2


def test_elements_without_semantic_classes_are_skipped():
    elements = _elements("flex", "px-4 mt-2", "")

    assert cluster_elements(elements) == []


# ============================================================================
# Pattern miner
# ============================================================================

class TestPatternMiner:
    """Tests for PatternMiner.mine."""

    def test_mines_list_items(self, load, list_items_html):
        patterns = PatternMiner().mine(load(list_items_html), AnalyzerOptions(min_items=3))

        assert [p.selector for p in patterns] == ["li.item.extra"]
        assert patterns[0].count == 5
        assert patterns[0].depth == 3
        assert len(patterns[0].samples) == 5

    def test_groups_below_min_items_are_dropped(self, load, list_items_html):
        patterns = PatternMiner().mine(load(list_items_html), AnalyzerOptions(min_items=6))

        assert patterns == []

    def test_samples_are_truncated_previews(self, load):
        long_text = "word " * 100
        html = "".join(f'<div class="entry">{long_text}{i}</div>' for i in range(12))

        pattern = PatternMiner().mine(load(html), AnalyzerOptions())[0]

        assert pattern.count == 12
        assert len(pattern.samples) == 10
        assert all(len(s.text) <= 100 for s in pattern.samples)
        assert all(len(s.html) <= 200 for s in pattern.samples)

    def test_exclude_selectors_remove_subtrees(self, load):
        cards = "".join(f'<div class="card"><p>Main {i}</p></div>' for i in range(4))
        side = "".join(f'<div class="card"><p>Side {i}</p></div>' for i in range(3))
        doc = load(f'<main>{cards}</main><aside class="sidebar">{side}</aside>')

        everything = PatternMiner().mine(doc, AnalyzerOptions())
        filtered = PatternMiner().mine(doc, AnalyzerOptions(exclude_selectors=[".sidebar"]))

        assert everything[0].count == 7
        assert filtered[0].count == 4

    def test_invalid_exclude_selector_is_skipped(self, load):
        cards = "".join(f'<div class="card"><p>Main {i}</p></div>' for i in range(4))
        side = "".join(f'<div class="card"><p>Side {i}</p></div>' for i in range(3))
        doc = load(f'<main>{cards}</main><aside class="sidebar">{side}</aside>')

        patterns = PatternMiner().mine(doc, AnalyzerOptions(exclude_selectors=["div[", ".sidebar"]))

        assert patterns[0].count == 4

    def test_ignore_nav_drops_navigation_landmarks(self, load):
        menu = "".join(f'<li class="menu-item">{label}</li>'
                       for label in ["Home", "About", "Blog", "Shop", "Contact"])
        doc = load(f"<nav><ul>{menu}</ul></nav>")

        assert PatternMiner().mine(doc, AnalyzerOptions())[0].selector == "li.menu-item"
        assert PatternMiner().mine(doc, AnalyzerOptions(ignore_nav=True)) == []

    def test_admission_filters(self, load):
        html = "".join(f'<div class="tile"><span>Tile {i}</span></div>' for i in range(4))
        doc = load(html)

        assert PatternMiner().mine(doc, AnalyzerOptions(min_children=1))
        assert PatternMiner().mine(doc, AnalyzerOptions(min_children=2)) == []
        assert PatternMiner().mine(doc, AnalyzerOptions(min_text_length=6))
        assert PatternMiner().mine(doc, AnalyzerOptions(min_text_length=7)) == []

    def test_mining_is_deterministic(self, load, books_html):
        doc = load(books_html)

        first = [p.model_dump() for p in PatternMiner().mine(doc, AnalyzerOptions())]
        second = [p.model_dump() for p in PatternMiner().mine(doc, AnalyzerOptions())]

        assert first == second


# ============================================================================
# Pattern scorer
# ============================================================================

def _pattern(selector="div.card", count=10, depth=4, texts=None, child_count=3):
    texts = texts if texts is not None else [f"distinct text {i}" for i in range(min(count, 10))]
    samples = [
        PatternSample(html="<div></div>", text=t, child_count=child_count, text_length=len(t))
        for t in texts
    ]
    return CandidatePattern(
        selector=selector,
        tag=selector.split(".")[0],
        classes=selector.split(".")[1:],
        elements=[object() for _ in range(count)],
        samples=samples,
        depth=depth
    )


class TestPatternScorer:
    """Tests for PatternScorer."""

    def test_score_formula(self):
        score, breakdown = PatternScorer().score_pattern(_pattern(), AnalyzerOptions())

        assert breakdown.count_score == pytest.approx(math.log(10) * 10)
        assert breakdown.depth_score == 10
        assert breakdown.diversity_bonus == pytest.approx(15)
        assert breakdown.child_score == pytest.approx(20)
        assert score == pytest.approx(math.log(10) * 10 + 45)

    def test_depth_away_from_ideal_is_penalized(self):
        _, breakdown = PatternScorer().score_pattern(_pattern(depth=7), AnalyzerOptions())
        assert breakdown.depth_score == 4

        _, breakdown = PatternScorer().score_pattern(_pattern(depth=12), AnalyzerOptions())
        assert breakdown.depth_score == 0

    def test_diversity_gate_forces_score(self):
        nav = _pattern(selector="a.nav-link", count=50, texts=["Home"] * 10, child_count=0)

        score, breakdown = PatternScorer().score_pattern(nav, AnalyzerOptions())

        assert score == GATED_SCORE
        assert breakdown.gated

    def test_diversity_neutral_without_text(self):
        assert diversity_score(_pattern(texts=["", "  ", "\n"])) == 0.5

    def test_diversity_normalizes_whitespace_and_case(self):
        pattern = _pattern(texts=["Hello  World", "hello world", "HELLO\nWORLD", "Other"])
        assert diversity_score(pattern) == pytest.approx(0.5)

    def test_anchor_penalty(self):
        _, breakdown = PatternScorer().score_pattern(_pattern(selector="a.teaser"), AnalyzerOptions())
        assert breakdown.anchor_penalty == -15

    def test_table_bonus_only_when_preferred(self):
        row = _pattern(selector="tr.row")

        _, plain = PatternScorer().score_pattern(row, AnalyzerOptions())
        _, preferred = PatternScorer().score_pattern(row, AnalyzerOptions(prefer_table=True))

        assert plain.table_bonus == 0
        assert preferred.table_bonus == 25
        assert table_bonus("table.grid tr") == 15
        assert table_bonus("div.card") == 0

    def test_max_depth_filters_before_scoring(self):
        shallow, deep = _pattern(depth=3), _pattern(selector="div.deep", depth=12)

        ranked = PatternScorer().score([shallow, deep], AnalyzerOptions(max_depth=10))

        assert [s.pattern.selector for s in ranked] == ["div.card"]

    def test_ties_keep_discovery_order(self):
        first, second = _pattern(selector="div.first"), _pattern(selector="div.second")

        ranked = PatternScorer().score([first, second], AnalyzerOptions())

        assert [s.pattern.selector for s in ranked] == ["div.first", "div.second"]

    def test_breakdown_only_in_diagnostics_mode(self):
        pattern = _pattern()

        plain = PatternScorer().score([pattern], AnalyzerOptions())[0]
        debug = PatternScorer().score([pattern], AnalyzerOptions(debug=True))[0]

        assert plain.breakdown is None
        assert debug.breakdown is not None
        assert plain.score == debug.score

    def test_gated_flag_without_diagnostics(self):
        nav = _pattern(selector="a.nav-link", texts=["Home"] * 10)

        scored = PatternScorer().score([nav, _pattern()], AnalyzerOptions())

        assert [s.gated for s in scored] == [False, True]
        assert all(s.breakdown is None for s in scored)

    def test_select_best_skips_gated_patterns(self):
        scorer = PatternScorer()
        gated = _pattern(selector="a.nav-link", texts=["Home"] * 10)

        assert scorer.select_best(scorer.score([gated], AnalyzerOptions())) is None

        ranked = scorer.score([gated, _pattern(count=3)], AnalyzerOptions())
        assert scorer.select_best(ranked).pattern.selector == "div.card"
