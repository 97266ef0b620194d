"""Tests for the two-pass Candidate Selector."""

import pytest

from contentlens.config import PROCESSED_MARKER_ATTR
from contentlens.dom.scanner import CandidateSelector
from contentlens.dom.selector_data import REPLY_SELECTOR_GROUPS
from contentlens.observability.telemetry import get_counter
from contentlens.scoring.text import content_key

LONG_A = (
    "I picked up the same drill last spring and the battery still holds a full "
    "charge after a day of framing work."
)
LONG_B = (
    "Honestly the second season dragged, but the finale made up for it with that "
    "long single-take chase scene."
)
SHORT_REPLY = "Short but real reply here, thanks."
TWEET = "Tweet text long enough to pass the floor."


@pytest.fixture
def selector():
    return CandidateSelector()


def elements(blocks):
    return [b.element for b in blocks]


class TestDominanceRule:
    def test_container_rejected_in_favour_of_dominant_child(self, selector, make_page):
        page = make_page(f'<div id="wrap"><p>{LONG_A}</p><span>ok</span></div>')

        blocks = selector.scan(page)

        assert len(blocks) == 1
        assert blocks[0].element is page.soup.find("p")
        assert not selector.is_scorable(page.soup.find("div"))

    def test_container_with_long_block_children_rejected(self, selector, make_page):
        page = make_page(f"<section><div>{LONG_A}</div><div>{LONG_B}</div></section>")

        blocks = selector.scan(page)

        divs = page.soup.find_all("div")
        assert [id(el) for el in elements(blocks)] == [id(divs[0]), id(divs[1])]
        assert not selector.is_scorable(page.soup.find("section"))

    def test_leaf_with_inline_children_accepted(self, selector, make_page):
        page = make_page(f"<p>{LONG_A[:60]}<b>{LONG_A[60:80]}</b>{LONG_A[80:]}</p>")

        blocks = selector.scan(page)

        assert len(blocks) == 1
        assert blocks[0].element.name == "p"

    def test_min_text_length_is_read_on_each_scan(self, selector, make_page):
        page = make_page(f"<p>{LONG_A}</p>")
        assert len(selector.scan(page)) == 1

        selector.set_min_text_length(200)
        assert selector.scan(page) == []


class TestTargetedPass:
    def test_targeted_match_uses_lower_floor(self, selector, make_page):
        page = make_page(f'<div class="comment"><span class="commtext c00">{SHORT_REPLY}</span></div>')

        blocks = selector.scan(page)

        assert len(blocks) == 1
        assert blocks[0].element is page.soup.find("span")
        assert blocks[0].normalized_text == SHORT_REPLY.lower()

    def test_duplicate_content_is_reported_once(self, selector, make_page):
        page = make_page(
            f'<span class="commtext">{SHORT_REPLY}</span><span class="commtext">{SHORT_REPLY}</span>'
        )

        blocks = selector.scan(page)

        assert len(blocks) == 1
        assert blocks[0].element is page.soup.find_all("span")[0]

    def test_trusted_match_skips_ui_heuristics(self, make_page):
        selector = CandidateSelector(selector_groups={"site": (".reply",)})
        page = make_page(f'<div class="reply nav-comment">{SHORT_REPLY}</div>')
        el = page.soup.find("div")

        assert selector.is_content_candidate(el, trusted=True)
        assert not selector.is_content_candidate(el)
        assert len(selector.scan(page)) == 1

    def test_excluded_test_ids_apply_to_trusted_matches(self, make_page):
        selector = CandidateSelector(selector_groups={"site": (".reply",)})
        page = make_page(f'<div class="reply" data-testid="UserName">{SHORT_REPLY}</div>')

        assert not selector.is_content_candidate(page.soup.find("div"), trusted=True)
        assert selector.scan(page) == []

    def test_invalid_selector_group_is_skipped(self, make_page):
        selector = CandidateSelector(selector_groups={"broken": ("div[",), "ok": (".reply",)})
        page = make_page(f'<div class="reply">{SHORT_REPLY}</div>')

        assert selector.group_names == ["ok"]
        assert get_counter("selector.invalid") == 1
        assert len(selector.scan(page)) == 1

    def test_builtin_groups_all_compile(self, selector):
        assert sorted(selector.group_names) == sorted(REPLY_SELECTOR_GROUPS)


class TestGenericPass:
    def test_pass1_only_host_skips_generic_walk(self, selector, make_page):
        body = f'<article><div data-testid="tweetText">{TWEET}</div></article><p>{LONG_A}</p>'

        on_x = selector.scan(make_page(body, url="https://x.com/someone/status/1"))
        elsewhere = selector.scan(make_page(body))

        assert [b.normalized_text for b in on_x] == [TWEET.lower()]
        assert len(elsewhere) == 2

    def test_hidden_elements_excluded(self, selector, make_page):
        page = make_page(f'<p hidden>{LONG_A}</p><div style="display: none"><p>{LONG_B}</p></div>')
        assert selector.scan(page) == []

    @pytest.mark.parametrize("wrapper", ["nav", "form", "footer", 'div role="toolbar"'])
    def test_excluded_subtree_is_pruned(self, selector, make_page, wrapper):
        tag = wrapper.split()[0]
        page = make_page(f"<{wrapper}><p>{LONG_A}</p></{tag}>")
        assert selector.scan(page) == []

    def test_ui_chrome_class_excluded(self, selector, make_page):
        page = make_page(f'<div class="sidebar-widget"><p>{LONG_A}</p></div>')
        assert selector.scan(page) == []

    def test_scan_root_is_always_visited(self, selector, make_page):
        page = make_page(f'<div class="sidebar"><p>{LONG_A}</p></div>')
        p = page.soup.find("p")

        blocks = selector.scan(page, root=p)

        assert elements(blocks) == [p]


class TestIncrementalPaths:
    def test_extract_block_floor_depends_on_targeting(self, selector, make_page):
        page = make_page(f'<span class="commtext">{SHORT_REPLY}</span><p>{SHORT_REPLY}</p>')

        assert selector.extract_block(page.soup.find("span"), page) is not None
        assert selector.extract_block(page.soup.find("p"), page) is None

    def test_extract_block_applies_dominance_rule(self, selector, make_page):
        page = make_page(f'<div id="wrap"><div id="inner">{LONG_A} {LONG_B}</div></div>')
        wrap = page.soup.find(id="wrap")
        inner = page.soup.find(id="inner")

        assert selector.extract_block(wrap, page) is None
        assert selector.extract_block(inner, page).element is inner

    @pytest.mark.parametrize(
        "markup",
        [
            f'<div class="sidebar-widget">{LONG_A}</div>',
            f"<div hidden>{LONG_A}</div>",
            f"<nav>{LONG_A}</nav>",
        ],
    )
    def test_extract_block_applies_exclusions(self, selector, make_page, markup):
        page = make_page(markup)
        assert selector.extract_block(page.body.find(True), page) is None

    def test_extract_block_of_detached_element(self, selector, make_page):
        page = make_page(f"<p>{LONG_A}</p>")
        p = page.soup.find("p")
        page.remove(p)

        assert selector.extract_block(p, page) is None

    def test_extract_block_key_matches_content_key(self, selector, make_page):
        page = make_page(f"<p>  {LONG_A}\n</p>")
        block = selector.extract_block(page.soup.find("p"), page)
        assert block.content_key == content_key(LONG_A)

    def test_collect_candidates_includes_root_and_descendants(self, selector, make_page):
        page = make_page("")
        added = page.append_html(
            page.body,
            f'<div class="comment"><span class="commtext">{SHORT_REPLY}</span><p>{LONG_A}</p></div>',
        )
        root = added[0]

        generic = selector.collect_candidates(root)
        targeted_only = selector.collect_candidates(root, allow_generic=False)

        assert [el.name for el in generic] == ["span", "p"]
        assert [el.name for el in targeted_only] == ["span"]

    def test_collect_candidates_on_targeted_root(self, selector, make_page):
        page = make_page(f'<span class="commtext">{SHORT_REPLY}</span>')
        span = page.soup.find("span")
        assert [id(el) for el in selector.collect_candidates(span)] == [id(span)]


class TestSweep:
    def test_sweep_finds_unmarked_and_stale_elements(self, selector, make_page):
        page = make_page(
            f'<div data-testid="tweetText">{TWEET}</div>'
            f'<div data-testid="tweetText">Another tweet that is long enough.</div>',
            url="https://x.com/home",
        )
        first, second = page.soup.find_all("div")

        assert [id(el) for el in selector.sweep(page)] == [id(first), id(second)]

        first[PROCESSED_MARKER_ATTR] = content_key(TWEET)
        assert [id(el) for el in selector.sweep(page)] == [id(second)]

        # Virtualized feeds recycle the node with new content
        page.set_text(first, "A completely different recycled tweet body.")
        assert [id(el) for el in selector.sweep(page)] == [id(first), id(second)]

    def test_sweep_ignores_short_targets(self, selector, make_page):
        page = make_page('<div data-testid="tweetText">gm</div>', url="https://x.com/home")
        assert selector.sweep(page) == []
