"""Deep links for the receiving application's custom-scheme endpoints.

  {scheme}:///add?url=&title=&category=   one record
  {scheme}:///import?data=                 JSON envelope
  {scheme}:///clipboard-import             read the envelope from the clipboard
"""

from __future__ import annotations

from urllib.parse import quote

from tabrelay.envelope import envelope_to_json
from tabrelay.models import ExportEnvelope, UrlRecord

# Same unreserved set as JavaScript's encodeURIComponent.
_SAFE = "!*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_SAFE)


def add_link(scheme: str, record: UrlRecord, category_name: str) -> str:
    return (
        f"{scheme}:///add?url={encode_component(record.url)}"
        f"&title={encode_component(record.title)}"
        f"&category={encode_component(category_name)}"
    )


def import_link(scheme: str, envelope: ExportEnvelope) -> str:
    return f"{scheme}:///import?data={encode_component(envelope_to_json(envelope))}"


def clipboard_import_link(scheme: str) -> str:
    return f"{scheme}:///clipboard-import"
