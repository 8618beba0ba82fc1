"""Atom rendering of a page's published revisions."""
from __future__ import annotations
import xml.etree.ElementTree as ET
from email.utils import format_datetime
from datetime import timezone
from typing import Optional
from urllib.parse import quote

from benchshare.domain.page.models import FeedModel

ATOM_NS = "http://www.w3.org/2005/Atom"
ATOM_CONTENT_TYPE = "application/atom+xml;charset=UTF-8"

ET.register_namespace("", ATOM_NS)


def _sub(parent: ET.Element, tag: str, text: Optional[str] = None, **attrib: str) -> ET.Element:
    el = ET.SubElement(parent, f"{{{ATOM_NS}}}{tag}", attrib)
    if text is not None:
        el.text = text
    return el


def http_date(feed: FeedModel) -> str:
    return format_datetime(feed.last_modified.astimezone(timezone.utc), usegmt=True)


def render_atom(feed: FeedModel, base_url: str) -> bytes:
    page = feed.page
    page_url = f"{base_url}/{quote(page.slug)}"

    root = ET.Element(f"{{{ATOM_NS}}}feed")
    _sub(root, "id", page_url)
    _sub(root, "title", page.title)
    _sub(root, "updated", feed.last_modified.isoformat())
    _sub(root, "link", rel="self", href=f"{page_url}.atom")
    _sub(root, "link", rel="alternate", href=page_url)

    for rev in feed.revisions:
        rev_url = f"{page_url}/{rev.revision}"
        entry = _sub(root, "entry")
        _sub(entry, "id", rev_url)
        _sub(entry, "title", rev.title)
        _sub(entry, "link", rel="alternate", href=rev_url)
        _sub(entry, "published", rev.created_at)
        _sub(entry, "updated", rev.updated_at)
        author = _sub(entry, "author")
        _sub(author, "name", rev.author or "Anonymous")

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)
