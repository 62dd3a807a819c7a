import pytest

from dal.index_parsing import IndexColumnParser, ParenthesizedIndexColumnParser


@pytest.mark.parametrize(
    "index_def,expected",
    [
        (
            "CREATE UNIQUE INDEX articles_pkey ON public.articles USING btree (id)",
            ["id"],
        ),
        (
            "CREATE INDEX articles_documents_idx ON public.articles "
            "USING btree (document_id, locale, published_at)",
            ["document_id", "locale", "published_at"],
        ),
        ("CREATE INDEX x ON public.t USING btree (a,b ,  c)", ["a", "b", "c"]),
        ("not an index definition", []),
        ("", []),
    ],
)
def test_parenthesized_parser(index_def, expected):
    """First parenthesized group, split on commas and trimmed."""
    assert ParenthesizedIndexColumnParser().parse(index_def) == expected


def test_expression_index_yields_literal_inner_text():
    """Functional indexes are not parsed as a grammar."""
    index_def = "CREATE INDEX users_email_idx ON public.users USING btree (lower((email)::text))"
    assert ParenthesizedIndexColumnParser().parse(index_def) == ["lower((email"]


def test_parser_satisfies_protocol():
    assert isinstance(ParenthesizedIndexColumnParser(), IndexColumnParser)
