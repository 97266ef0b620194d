"""
Module: selector_data
Purpose: Site selectors and exclusion tables for the Candidate Selector.
Dependencies: re (precompiled UI-chrome patterns only)

Edit this file to add sites or UI-chrome exclusions without touching the
tree-walking logic in scanner.py.
"""

import re

# ---------------------------------------------------------------------------
# Pass 1: targeted reply/comment selectors, grouped per site.
# A group that fails to compile or select is skipped on its own.
# ---------------------------------------------------------------------------

REPLY_SELECTOR_GROUPS: dict[str, tuple[str, ...]] = {
    "twitter": ('[data-testid="tweetText"]',),
    "reddit": (
        'shreddit-comment [slot="comment"]',
        ".usertext-body .md",
        '[id^="thing_t1_"] .md',
    ),
    "hackernews": (".commtext",),
    "stackexchange": (".s-prose", ".post-text"),
    "youtube": ("#content-text.ytd-comment-renderer",),
    "linkedin": (".comments-comment-item__main-content", ".update-components-text"),
    "medium": (".pw-post-body-paragraph",),
}

# Hosts whose DOM is unsafe for the generic walk (heavy virtualization)
PASS1_ONLY_HOSTS: frozenset[str] = frozenset(
    {
        "twitter.com",
        "x.com",
        "linkedin.com",
        "www.linkedin.com",
    }
)

# Hosts that recycle DOM nodes: the monitor sweeps these instead of diffing
SWEEP_HOSTS: frozenset[str] = frozenset(
    {
        "twitter.com",
        "x.com",
        "linkedin.com",
        "www.linkedin.com",
    }
)

# Groups re-checked by the periodic sweep, per sweep host
SWEEP_SELECTOR_GROUPS: dict[str, tuple[str, ...]] = {
    "twitter.com": REPLY_SELECTOR_GROUPS["twitter"],
    "x.com": REPLY_SELECTOR_GROUPS["twitter"],
    "linkedin.com": REPLY_SELECTOR_GROUPS["linkedin"],
    "www.linkedin.com": REPLY_SELECTOR_GROUPS["linkedin"],
}

# ---------------------------------------------------------------------------
# Pass 2: generic walk exclusions
# ---------------------------------------------------------------------------

EXCLUDED_TAGS: frozenset[str] = frozenset(
    {
        "script",
        "style",
        "noscript",
        "iframe",
        "object",
        "embed",
        "template",
        "svg",
        "canvas",
        "video",
        "audio",
        "head",
        "input",
        "textarea",
        "select",
        "button",
        "form",
        "nav",
        "header",
        "footer",
        "code",
        "pre",
    }
)

EXCLUDED_ROLES: frozenset[str] = frozenset(
    {
        "navigation",
        "banner",
        "complementary",
        "contentinfo",
        "menubar",
        "menu",
        "menuitem",
        "toolbar",
        "status",
        "search",
        "form",
    }
)

# Class/id names suggestive of UI chrome
UI_PATTERN_RE = re.compile(
    r"\b(nav|menu|btn|button|toolbar|sidebar|breadcrumb|pagination|header|footer"
    r"|widget|ad-|advertisement)\b",
    re.IGNORECASE,
)

# data-testid values that are UI, never content; applied even to trusted matches
EXCLUDED_TEST_IDS: frozenset[str] = frozenset(
    {
        "app-text-transition-container",
        "analyticsButton",
        "tweet-stats",
        "tweetEngagements",
        "tweetButtonInline",
        "reply",
        "like",
        "retweet",
        "UserName",
        "UserScreenName",
        "User-Name",
        "userActions",
        "placementTracking",
        "trend",
        "trendMetadata",
        "TypeaheadUser",
        "TypeaheadTopic",
        "cellInnerDiv",
    }
)

# Children with these tags and more than BLOCK_CHILD_MAX_CHARS of text make
# their parent a container rather than a leaf block
BLOCK_TAGS: frozenset[str] = frozenset(
    {
        "div",
        "section",
        "article",
        "aside",
        "main",
        "li",
        "ul",
        "ol",
        "table",
        "tr",
        "td",
        "th",
        "details",
        "summary",
    }
)

# Inline style fragments that hide an element
HIDDEN_STYLE_RE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)
