"""
Small XML document builder for RSS output.

Element text is written according to ESCAPING: free text goes into CDATA
sections, URL and date fields become ordinary escaped text nodes. Tags
missing from the table are rejected, so every new element has to declare
how it is written.
"""
from xml.dom import minidom

CDATA = "cdata"
TEXT = "text"

ESCAPING = {
    # free text
    "title": CDATA,
    "description": CDATA,
    "content:encoded": CDATA,
    "author": CDATA,
    "category": CDATA,
    "copyright": CDATA,
    "managingEditor": CDATA,
    "webMaster": CDATA,
    # URLs, identifiers, dates
    "link": TEXT,
    "url": TEXT,
    "guid": TEXT,
    "pubDate": TEXT,
    "lastBuildDate": TEXT,
    "language": TEXT,
    "generator": TEXT,
}


def cdata_sections(text):
    """Split text so no section contains the ']]>' terminator."""
    parts = text.split("]]>")
    sections = [parts[0]]
    for part in parts[1:]:
        sections[-1] += "]]"
        sections.append(">" + part)
    return sections


class FeedDocument:
    def __init__(self, root_tag, attributes=None):
        self.doc = minidom.Document()
        self.root = self._append(self.doc, root_tag, attributes)

    def _append(self, parent, tag, attributes=None):
        node = self.doc.createElement(tag)
        for name, value in (attributes or {}).items():
            node.setAttribute(name, value)
        parent.appendChild(node)
        return node

    def element(self, parent, tag, attributes=None):
        """Append an empty container element (or one carrying only attributes)."""
        return self._append(parent, tag, attributes)

    def field(self, parent, tag, value, attributes=None):
        """Append an element holding `value`, written per the ESCAPING table."""
        try:
            mode = ESCAPING[tag]
        except KeyError:
            raise ValueError(f"No escaping rule for <{tag}>")

        node = self._append(parent, tag, attributes)
        text = "" if value is None else str(value)
        if mode == CDATA:
            for section in cdata_sections(text):
                node.appendChild(self.doc.createCDATASection(section))
        else:
            node.appendChild(self.doc.createTextNode(text))
        return node

    def tostring(self):
        return self.doc.toxml(encoding="UTF-8").decode("utf-8")
