"""Tests for the allow-list HTML sanitizer."""

from __future__ import annotations

import pytest

from localekit.backend.app.localization import sanitize_string


def test_plain_text_is_returned_unchanged() -> None:
    assert sanitize_string('Please fill "Name".') == 'Please fill "Name".'


def test_disallowed_tags_are_stripped_but_text_kept() -> None:
    assert sanitize_string("<blink>Hey</blink> <b>you</b>") == "Hey <b>you</b>"


def test_script_and_style_content_is_dropped() -> None:
    text = "a<script>alert('x')</script>b<style>p{}</style>c"

    assert sanitize_string(text) == "abc"


def test_attributes_follow_the_moderate_allow_list() -> None:
    text = '<a href="/help" onclick="steal()" title="Help" style="color:red">?</a>'

    assert sanitize_string(text) == '<a href="/help" title="Help">?</a>'


def test_low_attribute_level_allows_style() -> None:
    text = '<span style="color:red">x</span>'

    assert sanitize_string(text, "low", "low") == text


def test_javascript_urls_are_removed() -> None:
    assert sanitize_string('<a href=" JavaScript:alert(1)">x</a>') == "<a>x</a>"


@pytest.mark.parametrize(
    "href",
    [
        "java&#x09;script:alert(1)",
        "java&#x0A;script:alert(1)",
        "\x01javascript:alert(1)",
        "JAVA&#13;SCRIPT&colon;alert(1)",
        " vb script:msgbox(1)",
    ],
)
def test_obfuscated_script_urls_are_removed(href: str) -> None:
    assert sanitize_string(f'<a href="{href}">x</a>') == "<a>x</a>"


def test_relative_and_http_links_are_kept() -> None:
    text = '<a href="/help">a</a><a href="https://example.org/">b</a>'

    assert sanitize_string(text) == text


def test_moderate_tag_level_rejects_block_elements() -> None:
    assert sanitize_string("<p><em>x</em></p>", "moderate") == "<em>x</em>"


def test_high_levels_strip_all_markup() -> None:
    assert sanitize_string("<b>x</b><br>", "high", "high") == "x"


def test_line_breaks_are_normalised() -> None:
    assert sanitize_string("one<br>two<br/>three") == "one<br />two<br />three"


def test_stray_angle_brackets_and_ampersands_are_escaped() -> None:
    assert sanitize_string("1 < 2 & 3 > 2") == "1 &lt; 2 &amp; 3 &gt; 2"


def test_entities_pass_through() -> None:
    assert sanitize_string("Tom&nbsp;&amp;&#160;Jerry") == "Tom&nbsp;&amp;&#160;Jerry"


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        sanitize_string("<b>x</b>", "extreme")
