import pytest

from biorecords.formats import _regex
from biorecords.formats.text import CONTINUATION_INDENT, format_items, tokenize

ITEMIZED = frozenset({"FT", "DR"})


@pytest.fixture
def gapdh_lines(data_dir):
    with open(data_dir / "gapdh.dat") as fin:
        return [x.rstrip("\n") for x in fin if not x.startswith("//")]


def test_tokenize_joins_lines_with_the_same_tag():
    lines = ["DE   RecName: Full=Serum albumin;", "DE            Short=BSA;", "OS   Bos taurus."]
    items = tokenize(lines)
    assert items == [("DE", "RecName: Full=Serum albumin; Short=BSA;"), ("OS", "Bos taurus.")]


def test_tokenize_itemized_tags():
    lines = [
        "DR   EMBL; L23961; AAA31313.1; -; mRNA.",
        "DR   Proteomes; UP000001811; Unplaced.",
        "FT   CHAIN           1..333",
        'FT                   /note="Glyceraldehyde-3-phosphate',
        'FT                   dehydrogenase"',
        "FT   ACT_SITE        152",
    ]
    items = tokenize(lines, ITEMIZED)
    assert items == [
        ("DR", "EMBL; L23961; AAA31313.1; -; mRNA."),
        ("DR", "Proteomes; UP000001811; Unplaced."),
        ("FT", 'CHAIN           1..333 /note="Glyceraldehyde-3-phosphate dehydrogenase"'),
        ("FT", "ACT_SITE        152"),
    ]


def test_tokenize_untagged_lines():
    lines = ["SQ   SEQUENCE   8 AA;", "     MVKV GVNG", "     FGRI"]
    assert tokenize(lines) == [("SQ", "SEQUENCE   8 AA;"), ("", "MVKV GVNG FGRI")]


def test_tokenize_empty_value():
    assert tokenize(["XX", "CC   text"]) == [("XX", ""), ("CC", "text")]


def test_tokenize_entry(gapdh_lines):
    items = tokenize(gapdh_lines, ITEMIZED)
    tags = [tag for tag, _ in items]
    assert tags.count("DT") == 1
    assert tags.count("DR") == 2
    assert tags.count("FT") == 2
    assert dict(items)["GN"] == "Name=GAPDH; Synonyms=GAPD;"


def test_regex_tokenize_gives_the_same_items(gapdh_lines):
    for itemized in (frozenset(), ITEMIZED):
        assert _regex.tokenize(gapdh_lines, itemized) == tokenize(gapdh_lines, itemized)


def test_format_items_short_values():
    lines = format_items([("ID", "G3P_RABIT"), ("", "MVKVGVNGFG RIGRLVTRAA")], width=75)
    assert lines == ["ID   G3P_RABIT", "     MVKVGVNGFG RIGRLVTRAA"]


def test_format_items_wraps_long_values():
    value = "Molecular cloning and sequence of a cDNA for rabbit glyceraldehyde-3-phosphate dehydrogenase."
    lines = format_items([("RT", value)], width=40)
    assert len(lines) > 1
    assert all(len(x) <= 45 for x in lines)
    assert all(x.startswith("RT   ") for x in lines)
    assert tokenize(lines) == [("RT", value)]


def test_format_items_keeps_indentation_of_itemized_values():
    items = [("FT", "CHAIN           1..333"), ("FT", CONTINUATION_INDENT + '/note="a b c d e f g h"')]
    lines = format_items(items, width=30, itemized=ITEMIZED)
    assert lines[0] == "FT   CHAIN           1..333"
    assert all(x.startswith("FT   " + CONTINUATION_INDENT) for x in lines[1:])
    assert tokenize(lines, ITEMIZED) == [("FT", 'CHAIN           1..333 /note="a b c d e f g h"')]


def test_format_items_empty_value():
    assert format_items([("XX", "")], width=75) == ["XX"]


def test_split_row():
    assert _regex.split_row("a\tb\t\tc") == ["a", "b", "", "c"]
    assert _regex.split_row("a,b", ",") == ["a", "b"]
