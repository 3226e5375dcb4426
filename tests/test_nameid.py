"""Tests for SAML name identifier serialization."""

from lxml import etree

from targetedid.nameid import (
    NAMEID_PERSISTENT,
    SAML_ASSERTION_NS,
    StructuredIdentifier,
    serialize_name_id,
)


class TestSerializeNameId:
    """Tests for NameID XML output."""

    def test_full_name_id(self):
        """Test value and both qualifiers are serialized."""
        xml = serialize_name_id(
            StructuredIdentifier(value="abc123", name_qualifier="idp1", sp_name_qualifier="sp1")
        )
        element = etree.fromstring(xml)

        assert element.tag == f"{{{SAML_ASSERTION_NS}}}NameID"
        assert element.text == "abc123"
        assert element.get("Format") == NAMEID_PERSISTENT
        assert element.get("NameQualifier") == "idp1"
        assert element.get("SPNameQualifier") == "sp1"

    def test_saml_prefix(self):
        """Test the conventional saml namespace prefix is used."""
        xml = serialize_name_id(StructuredIdentifier(value="v"))
        assert xml.startswith("<saml:NameID")
        assert 'xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion"' in xml

    def test_qualifiers_omitted_when_absent(self):
        """Test missing qualifiers produce no attributes."""
        element = etree.fromstring(serialize_name_id(StructuredIdentifier(value="v")))
        assert element.get("NameQualifier") is None
        assert element.get("SPNameQualifier") is None

    def test_value_is_escaped(self):
        """Test special characters survive serialization."""
        xml = serialize_name_id(StructuredIdentifier(value="a<b&c"))
        assert etree.fromstring(xml).text == "a<b&c"

    def test_to_dict(self):
        """Test dictionary form."""
        data = StructuredIdentifier(value="v", name_qualifier="idp").to_dict()
        assert data == {
            "value": "v",
            "name_qualifier": "idp",
            "sp_name_qualifier": None,
            "format": NAMEID_PERSISTENT,
        }
