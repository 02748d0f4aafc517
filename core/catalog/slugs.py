"""
Pure slug → display-name conversion.

Routing hands the resolver lower-kebab-case slugs (``deep-house``,
``strut--records``); page titles and CMS values use human spelling
(``Deep House``, ``Strut & Records``). Everything here is a string-to-string
transform with no side effects.
"""

from __future__ import annotations

import re

# Words kept lowercase unless they open the name ("Sounds of the Universe").
CONNECTOR_WORDS: frozenset[str] = frozenset(
    {"and", "or", "the", "of", "in", "on", "at", "to", "for", "with"}
)

# Format codes the catalog spells in capitals.
UPPERCASE_CODES: frozenset[str] = frozenset(
    {"lp", "ep", "cd", "dvd", "vhs", "2xlp", "3xlp", "2xcd", "mp3"}
)

# Catalog names whose hyphen is part of the name, not a word separator.
HYPHENATED_NAMES: dict[str, str] = {
    "hip-hop": "Hip-Hop",
    "jazz-funk": "Jazz-Funk",
    "soul-jazz": "Soul-Jazz",
    "afro-beat": "Afro-Beat",
    "afro-funk": "Afro-Funk",
    "lo-fi": "Lo-Fi",
    "nu-jazz": "Nu-Jazz",
    "post-punk": "Post-Punk",
    "p-funk": "P-Funk",
    "k-pop": "K-Pop",
    "j-pop": "J-Pop",
}

_MULTI_HYPHEN = re.compile(r"-{2,}")
_WORD_START = re.compile(r"(^|[\s\-/(])([^\s\-/(])")


def title_case(text: str) -> str:
    """Capitalize the first letter after each space, hyphen, slash or paren.

    The rest of each word is lowercased, so ``"JAZZ-FUNK"`` and
    ``"jazz-funk"`` both become ``"Jazz-Funk"``.

    Example:
        >>> title_case("soul-jazz classics")
        'Soul-Jazz Classics'
    """
    lowered = text.lower()
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), lowered)


def _humanize_word(word: str, index: int) -> str:
    key = word.lower()
    if key in UPPERCASE_CODES:
        return key.upper()
    if key in HYPHENATED_NAMES:
        return HYPHENATED_NAMES[key]
    if index > 0 and key in CONNECTOR_WORDS:
        return key
    return title_case(word)


def humanize_slug(slug: str, *, ampersand_and: bool = False) -> str:
    """Turn a kebab-case slug into a display name.

    - ``--`` (an escaped ampersand in routed slugs) becomes ``" & "``.
    - Registered hyphenated names keep their hyphen (``hip-hop`` → ``Hip-Hop``).
    - Format codes are uppercased (``lp`` → ``LP``).
    - Connector words stay lowercase except as the first word.

    Args:
        slug: Routed slug; surrounding whitespace is ignored.
        ampersand_and: Also spell a standalone ``and`` as ``&`` (labels).

    Example:
        >>> humanize_slug("sounds-of-the-universe")
        'Sounds of the Universe'
        >>> humanize_slug("strut--records")
        'Strut & Records'
    """
    slug = slug.strip()
    key = slug.lower()
    if key in HYPHENATED_NAMES:
        return HYPHENATED_NAMES[key]
    if key in UPPERCASE_CODES:
        return key.upper()

    groups = (_humanize_group(group) for group in _MULTI_HYPHEN.split(slug))
    name = " & ".join(g for g in groups if g)
    if ampersand_and:
        name = re.sub(r"\s+and\s+", " & ", name, flags=re.IGNORECASE)
    return name


def slugify(name: str) -> str:
    """Inverse of ``humanize_slug`` for catalog values.

    ``&`` becomes ``--``, inch marks and apostrophes are dropped, and any
    other run of non-alphanumerics becomes a single hyphen.

    Example:
        >>> slugify("Strut & Records")
        'strut--records'
        >>> slugify('12"')
        '12'
    """
    text = re.sub(r"\s*&\s*", "--", name.strip().lower())
    text = re.sub(r"[\"'’]", "", text)
    text = re.sub(r"[^a-z0-9-]+", "-", text)
    text = re.sub(r"-{3,}", "--", text)
    return text.strip("-")


def _humanize_group(group: str) -> str:
    """Humanize one ``--``-free run of a slug, preserving registered hyphenations."""
    words = [w for w in group.split("-") if w]
    out: list[str] = []
    i = 0
    while i < len(words):
        pair = f"{words[i]}-{words[i + 1]}".lower() if i + 1 < len(words) else None
        if pair is not None and pair in HYPHENATED_NAMES:
            out.append(HYPHENATED_NAMES[pair])
            i += 2
            continue
        out.append(_humanize_word(words[i], len(out)))
        i += 1
    return " ".join(out)
