"""GraphQL query builders for the Maildrop API.

Every user-supplied value goes through ``graphql_string`` before being placed
in the query text, so inbox names containing quotes or backslashes produce a
well-formed query instead of a syntax error on the server.
"""

import json

_INBOX_FIELDS = "id headerfrom subject date"
_MESSAGE_FIELDS = "id headerfrom subject date data html"


def graphql_string(value: str) -> str:
    """Return ``value`` as a quoted GraphQL string literal.

    JSON string escapes are a subset of GraphQL's, so ``json.dumps`` output is
    a valid literal.  Raises ValueError (UnicodeEncodeError) for text that
    can't be sent as UTF-8, e.g. lone surrogates from undecodable argv bytes.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"expected a non-empty string, got {value!r}")
    value.encode("utf-8")
    return json.dumps(value, ensure_ascii=False)


def inbox_query(mailbox: str) -> str:
    """Listing query: message summaries for one inbox."""
    return f"query {{ inbox(mailbox: {graphql_string(mailbox)}) {{ {_INBOX_FIELDS} }} }}"


def message_query(mailbox: str, message_id: str) -> str:
    """Detail query: full data and html for one message."""
    return (
        f"query {{ message(mailbox: {graphql_string(mailbox)}, "
        f"id: {graphql_string(message_id)}) {{ {_MESSAGE_FIELDS} }} }}"
    )
