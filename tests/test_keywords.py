from adventure_book.domain import keywords


def test_make_keyword_tolerates_whitespace() -> None:
    pattern = keywords.make_keyword("stuffed animals")

    assert pattern.search("[stuffed animals]")
    assert pattern.search("[ stuffed   animals ]")
    assert not pattern.search("[stuffedanimals]")
    assert not pattern.search("stuffed animals")


def test_create_keyword_wraps_trimmed_name() -> None:
    assert keywords.create_keyword(" strength ") == "[strength]"


def test_is_keyword_valid() -> None:
    assert keywords.is_keyword_valid("strength")
    assert keywords.is_keyword_valid("stuffed animals")
    assert keywords.is_keyword_valid("level2")
    assert not keywords.is_keyword_valid("")
    assert not keywords.is_keyword_valid("gold-coins")
    assert not keywords.is_keyword_valid("[gold]")


def test_is_present() -> None:
    assert keywords.is_present("You have [ gold ] coins.", "gold")
    assert not keywords.is_present("You have gold coins.", "gold")


def test_find_keywords_in_order() -> None:
    text = "[hero] counts [ stuffed  animals ] and [gold]."

    assert keywords.find_keywords(text) == ["hero", "stuffed animals", "gold"]


def test_rename_replaces_every_tag() -> None:
    text = "[x] marks the spot, [ x ] twice, and 2x6 stays."

    assert keywords.rename(text, "x", "treasure") == "[treasure] marks the spot, [treasure] twice, and 2x6 stays."


def test_rename_leaves_text_without_tags_untouched() -> None:
    text = "x marks the spot"

    assert keywords.rename(text, "x", "y") == text


def test_substitute_uses_values_and_missing_callback() -> None:
    missing: list[str] = []

    def _on_missing(identifier: str) -> str:
        missing.append(identifier)
        return "?"

    result = keywords.substitute("[hero] has [gold] and [ghost].", {"hero": "Ann", "gold": "3"}, _on_missing)

    assert result == "Ann has 3 and ?."
    assert missing == ["ghost"]
