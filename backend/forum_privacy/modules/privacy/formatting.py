"""
Message rendering and descriptions of exported preference facts.
"""

import html

from forum_privacy.models.forum import DISCUSSION_UNSUBSCRIBED, DigestMode, MessageFormat

DIGEST_TYPES = {
    DigestMode.OFF: "No digest (single email per forum post)",
    DigestMode.COMPLETE: "Complete (daily email with full posts)",
    DigestMode.SUBJECTS: "Subjects (daily email with subjects only)",
}


def digest_description(forum_name: str, mail_digest: int) -> str:
    """Describe a per-forum digest preference."""
    try:
        digest_type = DIGEST_TYPES[DigestMode(mail_digest)]
    except ValueError:
        digest_type = f"Unknown digest type {mail_digest}"
    return (
        f'You have chosen to receive the following email digest type '
        f'for "{forum_name}": "{digest_type}".'
    )


def subscription_description() -> str:
    return "You are subscribed to this forum."


def tracking_description() -> str:
    return "Read tracking has been disabled for this forum."


def discussion_subscription_description(preference: int) -> str:
    """Describe a discussion subscription preference."""
    if preference == DISCUSSION_UNSUBSCRIBED:
        state = "Unsubscribed"
    else:
        state = "Subscribed"
    return (
        "You have chosen the following discussion subscription preference "
        f'for this forum: "{state}".'
    )


def read_description(first_read: str | None, last_read: str | None) -> str:
    return f"This post was first read on {first_read} and most recently read on {last_read}."


def site_digest_description(mail_digest: int) -> str:
    try:
        return DIGEST_TYPES[DigestMode(mail_digest)]
    except ValueError:
        return DIGEST_TYPES[DigestMode.OFF]


def format_message(text: str, message_format: int) -> str:
    """
    Render a message body according to its declared format.

    HTML is kept as stored and plain text is escaped with line breaks kept.
    Markdown is not rendered: markdown and auto-format text are exported as
    their source, escaped and wrapped in a paragraph.
    """
    if message_format == MessageFormat.HTML:
        return text
    escaped = html.escape(text)
    if message_format == MessageFormat.PLAIN:
        return escaped.replace("\r\n", "\n").replace("\n", "<br />")
    return f"<p>{escaped}</p>" if escaped else ""
