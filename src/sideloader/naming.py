"""Deterministic naming helpers used to compute field and output keys."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, List, Pattern, Tuple

Rule = Tuple[Pattern[str], str]

UNCOUNTABLE = frozenset(
    {
        "equipment",
        "fish",
        "information",
        "jeans",
        "metadata",
        "money",
        "news",
        "police",
        "rice",
        "series",
        "sheep",
        "species",
    }
)

IRREGULAR = (
    ("person", "people"),
    ("man", "men"),
    ("child", "children"),
    ("sex", "sexes"),
    ("move", "moves"),
    ("zombie", "zombies"),
)

# Later entries take precedence over earlier ones.
_PLURAL_RULES = [
    (r"$", "s"),
    (r"s$", "s"),
    (r"^(ax|test)is$", r"\1es"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(octop|vir)i$", r"\1i"),
    (r"(alias|status)$", r"\1es"),
    (r"(bu)s$", r"\1ses"),
    (r"(buffal|tomat)o$", r"\1oes"),
    (r"([ti])um$", r"\1a"),
    (r"([ti])a$", r"\1a"),
    (r"sis$", "ses"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"(hive)$", r"\1s"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"^(m|l)ouse$", r"\1ice"),
    (r"^(m|l)ice$", r"\1ice"),
    (r"^(ox)$", r"\1en"),
    (r"^(oxen)$", r"\1"),
    (r"(quiz)$", r"\1zes"),
]

_SINGULAR_RULES = [
    (r"s$", ""),
    (r"(ss)$", r"\1"),
    (r"(n)ews$", r"\1ews"),
    (r"([ti])a$", r"\1um"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
    (r"(^analy)(sis|ses)$", r"\1sis"),
    (r"([^f])ves$", r"\1fe"),
    (r"(hive)s$", r"\1"),
    (r"(tive)s$", r"\1"),
    (r"([lr])ves$", r"\1f"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"(s)eries$", r"\1eries"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"^(m|l)ice$", r"\1ouse"),
    (r"(bus)(es)?$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(shoe)s$", r"\1"),
    (r"(cris|test)(is|es)$", r"\1is"),
    (r"^(a)x[ie]s$", r"\1xis"),
    (r"(octop|vir)(us|i)$", r"\1us"),
    (r"(alias|status)(es)?$", r"\1"),
    (r"^(ox)en", r"\1"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(matr)ices$", r"\1ix"),
    (r"(quiz)zes$", r"\1"),
    (r"(database)s$", r"\1"),
]


def _compile(rules) -> List[Rule]:
    return [(re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in reversed(rules)]


PLURALS = _compile(_PLURAL_RULES)
SINGULARS = _compile(_SINGULAR_RULES)
IRREGULAR_PLURALS = dict(IRREGULAR)
IRREGULAR_SINGULARS = {plural: singular for singular, plural in IRREGULAR}

_WORD_SPLIT = re.compile(r"[\s_\-]+")
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|[\s_\-]+")


def _apply(word: str, rules: List[Rule], irregular: Dict[str, str]) -> str:
    if not word:
        return word
    tail = _WORD_BOUNDARY.split(word)[-1] or word
    if tail.lower() in UNCOUNTABLE:
        return word
    replacement = irregular.get(tail.lower())
    if replacement is not None:
        return word[: len(word) - len(tail)] + tail[0] + replacement[1:]
    for pattern, replacement in rules:
        if pattern.search(word):
            # Unmatched optional groups expand to "" under re.sub.
            return pattern.sub(replacement, word, count=1)
    return word


@lru_cache(maxsize=1024)
def pluralize(word: str) -> str:
    return _apply(word, PLURALS, IRREGULAR_PLURALS)


@lru_cache(maxsize=1024)
def singularize(word: str) -> str:
    return _apply(word, SINGULARS, IRREGULAR_SINGULARS)


@lru_cache(maxsize=1024)
def camelize(value: str) -> str:
    """Return ``value`` in lower camel case: ``blog_posts`` -> ``blogPosts``."""
    parts = [part for part in _WORD_SPLIT.split(value.strip()) if part]
    if not parts:
        return ""
    head, *tail = parts
    return head[0].lower() + head[1:] + "".join(p[0].upper() + p[1:] for p in tail)


def classify(value: str) -> str:
    """Return a singular PascalCase type name: ``blog_posts`` -> ``BlogPost``."""
    camel = camelize(singularize(value))
    return camel[:1].upper() + camel[1:]


class NamingService:
    """Field and key naming derived from ``pluralize`` and ``camelize``."""

    def pluralize(self, name: str) -> str:
        return pluralize(name)

    def camelize(self, name: str) -> str:
        return camelize(name)

    def has_many_field(self, relation_name: str) -> str:
        return self.camelize(self.pluralize(relation_name))

    def foreign_key_field(self, relation_name: str) -> str:
        return self.camelize(relation_name) + "Id"

    def output_key(self, type_name: str) -> str:
        return self.camelize(self.pluralize(type_name))
