"""Tests for message rendering."""

import pytest

from forum_privacy.models import MessageFormat
from forum_privacy.modules.privacy.formatting import format_message


def test_html_is_kept_as_stored():
    assert format_message("<p>Hi <b>all</b></p>", MessageFormat.HTML) == "<p>Hi <b>all</b></p>"


def test_plain_text_is_escaped_with_line_breaks():
    assert format_message("a < b\r\nc", MessageFormat.PLAIN) == "a &lt; b<br />c"


@pytest.mark.parametrize("message_format", [MessageFormat.MARKDOWN, MessageFormat.AUTO])
def test_markdown_is_exported_as_source(message_format):
    text = "**bold** and <i>tag</i>"

    assert format_message(text, message_format) == (
        "<p>**bold** and &lt;i&gt;tag&lt;/i&gt;</p>"
    )


def test_empty_source_stays_empty():
    assert format_message("", MessageFormat.MARKDOWN) == ""
