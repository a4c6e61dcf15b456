"""Tests for pluralization and key naming."""

import pytest

from sideloader.naming import (NamingService, camelize, classify, pluralize,
                               singularize)


@pytest.mark.parametrize(
    "word, expected",
    [
        ("book", "books"),
        ("Book", "Books"),
        ("person", "people"),
        ("Person", "People"),
        ("SalesPerson", "SalesPeople"),
        ("category", "categories"),
        ("status", "statuses"),
        ("box", "boxes"),
        ("wife", "wives"),
        ("news", "news"),
        ("BlogPost", "BlogPosts"),
    ],
)
def test_pluralize(word, expected):
    assert pluralize(word) == expected


def test_singularize():
    assert singularize("books") == "book"
    assert singularize("people") == "person"
    assert singularize("categories") == "category"
    assert singularize("statuses") == "status"


def test_camelize():
    assert camelize("blog_posts") == "blogPosts"
    assert camelize("Person") == "person"
    assert camelize("People") == "people"
    assert camelize("tag-items") == "tagItems"
    assert camelize("") == ""


def test_classify():
    assert classify("blog_posts") == "BlogPost"
    assert classify("people") == "Person"


def test_naming_service_keys():
    naming = NamingService()
    assert naming.has_many_field("books") == "books"
    assert naming.has_many_field("tag") == "tags"
    assert naming.foreign_key_field("author") == "authorId"
    assert naming.foreign_key_field("blog_post") == "blogPostId"
    assert naming.output_key("Person") == "people"
    assert naming.output_key("BlogPost") == "blogPosts"


def test_naming_is_deterministic():
    assert pluralize("Author") == pluralize("Author") == "Authors"
