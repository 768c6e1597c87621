"""Tests for jsxhoist.componentize.collector."""

from jsxhoist.componentize.collector import CandidateGroup, collect_candidates
from jsxhoist.componentize.options import ExtractorOptions
from jsxhoist.markup.nodes import Element
from jsxhoist.markup.parser import parse_document


def _roots(code: str):
    return [r.element for r in parse_document(code).roots]


def _collect(code: str, **kwargs):
    return collect_candidates(_roots(code), ExtractorOptions(**kwargs))


def test_group_properties():
    a, b = Element(tag="p"), Element(tag="p")
    group = CandidateGroup("p:0:0:", [a, b])
    assert group.example is a
    assert group.count == 2
    assert group.name is None


def test_collects_repeated_shapes():
    groups = _collect("const a = <ul><li>a</li><li>b</li><li>c</li></ul>;")
    assert len(groups) == 1
    assert groups[0].fingerprint == "li:0:1:"
    assert groups[0].count == 3


def test_single_occurrence_is_not_a_group():
    assert _collect("const a = <ul><li>a</li><p>b</p></ul>;") == []


def test_min_repeats_threshold():
    code = "const a = <ul><li>a</li><li>b</li><p>x</p><p>y</p><p>z</p></ul>;"
    groups = _collect(code, min_repeats=3)
    assert [g.fingerprint for g in groups] == ["p:0:1:"]


def test_roots_are_never_candidates():
    code = "const a = <p>a</p>;\nconst b = <p>b</p>;\n"
    assert _collect(code) == []


def test_sorted_by_count_descending_ties_keep_discovery_order():
    code = (
        "const a = <div>"
        "<b>1</b><b>2</b>"
        "<i>1</i><i>2</i><i>3</i>"
        "<u>1</u><u>2</u>"
        "</div>;"
    )
    groups = _collect(code)
    assert [g.fingerprint for g in groups] == ["i:0:1:", "b:0:1:", "u:0:1:"]


def test_occurrences_are_in_document_order():
    roots = _roots("const a = <ul><li>a</li><li>b</li></ul>;")
    groups = collect_candidates(roots, ExtractorOptions())
    assert groups[0].occurrences == [c for c in roots[0].children]


def test_skip_tags_are_not_candidates():
    code = "const a = <div><svg /><svg /><path /><path /></div>;"
    assert _collect(code) == []


def test_skip_tags_match_case_insensitively():
    code = "const a = <svg><linearGradient /><linearGradient /></svg>;"
    assert _collect(code) == []


def test_children_of_skip_tags_are_not_candidates():
    code = "const a = <div><svg><title>a</title><title>b</title></svg></div>;"
    assert _collect(code) == []


def test_custom_skip_tags():
    code = "const a = <ul><li>a</li><li>b</li></ul>;"
    assert _collect(code, skip_tags=frozenset({"LI"})) == []


def test_custom_components_are_not_candidates():
    code = "const a = <div><Card /><Card /></div>;"
    assert _collect(code) == []


def test_group_dropped_when_any_occurrence_is_inside_a_component():
    code = (
        "const a = <div>"
        "<Layout><section><p>a</p></section></Layout>"
        "<section><p>b</p></section>"
        "</div>;"
    )
    fingerprints = [g.fingerprint for g in _collect(code)]
    assert "section:0:1:" not in fingerprints
    assert "p:0:1:" not in fingerprints


def test_fragment_and_member_tags_are_skipped():
    code = "const a = <div><><p>a</p></><><p>b</p></></div>;"
    # The fragments are skipped and so are their direct children.
    assert _collect(code) == []


def test_custom_fingerprint_function():
    roots = _roots("const a = <div><p>a</p><span>b</span></div>;")
    groups = collect_candidates(
        roots, ExtractorOptions(), fingerprint=lambda el: "same"
    )
    assert len(groups) == 1
    assert [el.tag for el in groups[0].occurrences] == ["p", "span"]


def test_differing_expressions_share_a_group():
    groups = _collect("const a = <div><p>{x}</p><p>{y.z()}</p></div>;")
    assert [(g.fingerprint, g.count) for g in groups] == [("p:0:1:", 2)]
