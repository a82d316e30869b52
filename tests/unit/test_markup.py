import xml.etree.ElementTree as ET

import pytest

from biorecords.formats import ElementCursor

DOCUMENT = """
<entry xmlns="http://uniprot.org/uniprot" dataset="Swiss-Prot">
  <accession>P02769</accession>
  <accession>Q3SZ57</accession>
  <gene>
    <name type="synonym">ALB1</name>
    <name type="primary">ALB</name>
  </gene>
  <sequence length="3">
    MKW
  </sequence>
</entry>
"""


@pytest.fixture
def cursor():
    return ElementCursor(ET.fromstring(DOCUMENT))


def test_name(cursor):
    assert cursor.name == "entry"


def test_attribute(cursor):
    assert cursor.attribute("dataset") == "Swiss-Prot"
    assert cursor.attribute("missing") == ""
    assert cursor.attribute("missing", "x") == "x"


def test_children(cursor):
    assert [x.text() for x in cursor.children("accession")] == ["P02769", "Q3SZ57"]


def test_child_returns_first_match(cursor):
    assert cursor.child("accession").text() == "P02769"
    assert cursor.child("comment") is None


def test_child_with_attributes(cursor):
    gene = cursor.child("gene")
    assert gene.child("name", type="primary").text() == "ALB"
    assert gene.child("name", type="ORF") is None


def test_find(cursor):
    assert cursor.find("gene", "name").text() == "ALB1"
    assert cursor.find("protein", "recommendedName") is None
    assert cursor.find() is cursor


def test_text_strips_whitespace(cursor):
    assert cursor.child("sequence").text() == "MKW"
    assert cursor.child("gene").text() == ""
    empty = ElementCursor(ET.Element("name"))
    assert empty.text() == ""
    assert empty.text("default") == "default"
