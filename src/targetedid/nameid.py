"""
SAML 2.0 name identifier serialization for structured output.
"""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

SAML_ASSERTION_NS = "urn:oasis:names:tc:SAML:2.0:assertion"
NAMEID_PERSISTENT = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"


@dataclass(frozen=True)
class StructuredIdentifier:
    """A derived value with its source (IdP) and target (SP) qualifiers."""

    value: str
    name_qualifier: str | None = None
    sp_name_qualifier: str | None = None
    format: str = NAMEID_PERSISTENT

    def to_dict(self) -> dict[str, str | None]:
        return {
            "value": self.value,
            "name_qualifier": self.name_qualifier,
            "sp_name_qualifier": self.sp_name_qualifier,
            "format": self.format,
        }


def build_name_id(identifier: StructuredIdentifier) -> etree._Element:
    """Build a ``saml:NameID`` element."""
    element = etree.Element(
        f"{{{SAML_ASSERTION_NS}}}NameID",
        nsmap={"saml": SAML_ASSERTION_NS},
    )
    if identifier.name_qualifier:
        element.set("NameQualifier", identifier.name_qualifier)
    if identifier.sp_name_qualifier:
        element.set("SPNameQualifier", identifier.sp_name_qualifier)
    element.set("Format", identifier.format)
    element.text = identifier.value
    return element


def serialize_name_id(identifier: StructuredIdentifier) -> str:
    """Serialize a structured identifier as a ``saml:NameID`` XML string."""
    return etree.tostring(build_name_id(identifier), encoding="unicode")
