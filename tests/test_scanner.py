import logging

import pytest

from pericope import BookTable, Pericope
from pericope.engine.scanner import Extraction, extract, parse_all, rsub, split, sub, to_token


EXTRACTION_TEXT = "\n".join(
    [
        "2 Peter 4.1 Lorem ipsum dolor sit amet, Mark consectetur adipiscing elit 7. 1-2 Donec aliquam erat luctus",
        "lacinia. Cras aliquet urna sed massa viverra eget ultricies risus sodales. Maecenas aliquet felis nec",
        "justo pharetra rutrum eget a risus. (Jas. 1:13, 20) Etiam tincidunt pellentesque cursus. Nulla est libero,",
        "bibendum sed elementum vitae, elementum vehicula quam. In bibendum massa sed quam convallis sed lacinia",
        "orci aliquet. Donec tempus sodales, jn 21:14, zech 4:7, mk 3-1, and mt 12:13. Vestibulum nec nibh dolor,",
        "vel hendrerit libero. Donec porta felis at lectus condimentum sollicitudin. Donec samuel magna in leo",
        'vestibulum aliquam. Suspendisse eget magna leo 3"2-1, in rutrum metus. Pellentesque nec lectus imperdiet',
        "arcu venenatis placerat in quis diam. Luke 2---Mauris enim sapien, feugiat at vulputate ac, imperdiet sit",
        'amet tellus. Donec posuere nisi odio, et laoreet libero. Luke 3"1---Aliquam iaculis, elit sed venenatis',
        "suscipit, tellus nibh sodales tortor, non lobortis neque sapien quis ante. Vivamus laoreet, mi eu imperdiet",
        "bibendum, purus orci iaculis mi, vel first kings mi nisi auctor mauris. Integer dapibus lacinia arcu, ac",
        "dignissim justo consectetur sit amet. (Acts 13:4-20)",
    ]
)

EXTRACTED_TEXT = "\n".join(
    [
        " Lorem ipsum dolor sit amet, Mark consectetur adipiscing elit 7. 1-2 Donec aliquam erat luctus",
        "lacinia. Cras aliquet urna sed massa viverra eget ultricies risus sodales. Maecenas aliquet felis nec",
        "justo pharetra rutrum eget a risus. () Etiam tincidunt pellentesque cursus. Nulla est libero,",
        "bibendum sed elementum vitae, elementum vehicula quam. In bibendum massa sed quam convallis sed lacinia",
        "orci aliquet. Donec tempus sodales, , , , and . Vestibulum nec nibh dolor,",
        "vel hendrerit libero. Donec porta felis at lectus condimentum sollicitudin. Donec samuel magna in leo",
        'vestibulum aliquam. Suspendisse eget magna leo 3"2-1, in rutrum metus. Pellentesque nec lectus imperdiet',
        "arcu venenatis placerat in quis diam. ---Mauris enim sapien, feugiat at vulputate ac, imperdiet sit",
        "amet tellus. Donec posuere nisi odio, et laoreet libero. ---Aliquam iaculis, elit sed venenatis",
        "suscipit, tellus nibh sodales tortor, non lobortis neque sapien quis ante. Vivamus laoreet, mi eu imperdiet",
        "bibendum, purus orci iaculis mi, vel first kings mi nisi auctor mauris. Integer dapibus lacinia arcu, ac",
        "dignissim justo consectetur sit amet. ()",
    ]
)

EXTRACTED_REFERENCES = [
    "2 Peter 3:1",
    "James 1:13, 20",
    "John 21:14",
    "Zechariah 4:7",
    "Mark 3",
    "Matthew 12:13",
    "Luke 2",
    "Luke 3:1",
    "Acts 13:4-20",
]


def test_splitting_text_into_keywords() -> None:
    text = (
        "Paul, rom. 12:1-4, Romans 9:7, 11, Election, Theology of Glory, "
        "Theology of the Cross, 1 Cor 15, Resurrection"
    )
    keywords = []
    for part in Pericope.split(text):
        if isinstance(part, Pericope):
            keywords.append(part.to_s())
        else:
            keywords.extend(s.strip() for s in part.split(",") if s.strip())
    assert keywords == [
        "Paul",
        "Romans 12:1-4",
        "Romans 9:7, 11",
        "Election",
        "Theology of Glory",
        "Theology of the Cross",
        "1 Corinthians 15",
        "Resurrection",
    ]


def test_pericope_extraction() -> None:
    plain = []
    references = []
    for part in split(EXTRACTION_TEXT):
        if isinstance(part, Pericope):
            references.append(part.to_s())
        else:
            plain.append(part)
    assert references == EXTRACTED_REFERENCES
    assert "".join(plain) == EXTRACTED_TEXT


def test_extract_and_parse_all() -> None:
    result = extract(EXTRACTION_TEXT)
    assert isinstance(result, Extraction)
    assert result.text == EXTRACTED_TEXT
    assert [p.to_s() for p in result.pericopes] == EXTRACTED_REFERENCES
    assert [p.to_s() for p in parse_all(EXTRACTION_TEXT)] == EXTRACTED_REFERENCES
    assert Pericope.extract(EXTRACTION_TEXT) == result
    assert Pericope.parse_all("gen 1 and ex 2") == parse_all("gen 1 and ex 2")


def test_split_segments_cover_the_text() -> None:
    parts = list(split(EXTRACTION_TEXT))
    assert "".join(p if isinstance(p, str) else p.original_string for p in parts) == EXTRACTION_TEXT
    assert all(p != "" for p in parts)


def test_split_is_lazy() -> None:
    scanner = Pericope.split("gen 1 and ex 2")
    first = next(scanner)
    assert isinstance(first, Pericope)
    assert first.to_s() == "Genesis 1"
    assert next(scanner) == " and "
    assert next(scanner).to_s() == "Exodus 2"
    with pytest.raises(StopIteration):
        next(scanner)


def test_split_plain_and_empty_text() -> None:
    assert list(split("")) == []
    assert list(split("no references here")) == ["no references here"]


def test_pericope_substitution() -> None:
    text = "2 Peter 3:1-2 Lorem ipsum dolor sit amet"
    tokens = "{{61003001 61003002}} Lorem ipsum dolor sit amet"
    assert Pericope.sub(text) == tokens
    assert Pericope.rsub(tokens) == text


def test_substitution_round_trip_formats_references() -> None:
    text = "See jn 3:16 and ps 1-2; then (Jas. 1:13, 20)."
    assert sub(text) == (
        "See {{43003016}} and {{"
        + " ".join(str(i) for i in Pericope.parse("ps 1-2").to_a())
        + "}}; then ({{59001013 59001020}})."
    )
    assert rsub(sub(text)) == "See John 3:16 and Psalm 1-2; then (James 1:13, 20)."


def test_to_token() -> None:
    assert to_token(Pericope.parse("jn 3:16-17")) == "{{43003016 43003017}}"


@pytest.mark.parametrize("token", ["{{1001001 2001001}}", "{{99001001}}", "{{1001032}}"])
def test_rsub_leaves_bad_tokens(token: str, caplog: pytest.LogCaptureFixture) -> None:
    text = f"before {token} after {{{{43003016}}}}"
    with caplog.at_level(logging.WARNING, logger="pericope.engine.scanner"):
        assert rsub(text) == f"before {token} after John 3:16"
    assert len(caplog.records) == 1
    assert token in caplog.records[0].getMessage()


def test_rsub_ignores_text_that_is_not_a_token() -> None:
    text = "{{12}} {{not ids}} {43003016}"
    assert rsub(text) == text


def test_custom_book_table() -> None:
    table = BookTable.from_dict(
        {"books": [{"index": 1, "name": "1 Esdras", "ordinal": 1, "aliases": ["esdras", "esd"], "verses": [58, 70]}]}
    )
    assert sub("see 1 esd 2:3 and jn 3:16", table) == "see {{1002003}} and jn 3:16"
    assert rsub("{{1002003}}", table) == "1 Esdras 2:3"
    assert Pericope.parse("first esdras 1", table).to_a()[-1] == 1001058
