"""Download links for documents already e-mailed to a tenant."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from agents.shared.i18n import Translate
from backend.clients.rent_api import RentApiClient
from backend.core.logging import get_logger

from .dto import DocumentKind, Rent
from .errors import RentsError, error_for_status, message_for

logger = get_logger(__name__)

DEFAULT_SENT_DATE_FORMAT = "%A, %B %-d, %Y %-I:%M %p"

# Unpadded fields; strftime only understands "%-" on glibc
_UNPADDED_FIELDS = {
    "%-d": lambda value: str(value.day),
    "%-m": lambda value: str(value.month),
    "%-H": lambda value: str(value.hour),
    "%-I": lambda value: str(value.hour % 12 or 12),
}


@dataclass(frozen=True)
class DocumentLink:
    kind: DocumentKind
    url: str
    document_name: str
    tooltip: str = ""


@dataclass
class DownloadedDocument:
    filename: str
    content: bytes | None = None
    error: RentsError | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.content is not None


def format_sent_date(value: datetime, date_format: str = DEFAULT_SENT_DATE_FORMAT) -> str:
    """strftime with the unpadded ``%-d``, ``%-m``, ``%-H`` and ``%-I`` fields."""
    for token, render in _UNPADDED_FIELDS.items():
        date_format = date_format.replace(token, render(value))
    return value.strftime(date_format)


def document_url(kind: DocumentKind, occupant_id: str, term: str) -> str:
    return f"/{kind.value}/{occupant_id}/{term}"


def document_name(kind: DocumentKind, occupant_name: str, t: Translate) -> str:
    return f"{occupant_name}-{t(kind.download_label)}.pdf"


def document_link(
    rent: Rent,
    kind: DocumentKind,
    t: Translate,
    date_format: str = DEFAULT_SENT_DATE_FORMAT,
) -> DocumentLink | None:
    """Link for ``kind`` if it was sent for this rent, else None."""
    status = rent.document_status(kind)
    if not status.sent:
        return None
    tooltip = ""
    if status.last_sent_date is not None:
        tooltip = t("sent on {{datetime}}", {"datetime": format_sent_date(status.last_sent_date, date_format)})
    return DocumentLink(
        kind=kind,
        url=document_url(kind, rent.occupant.id, rent.term),
        document_name=document_name(kind, rent.occupant.name, t),
        tooltip=tooltip,
    )


def document_links(rent: Rent, t: Translate, date_format: str = DEFAULT_SENT_DATE_FORMAT) -> dict[DocumentKind, DocumentLink | None]:
    return {kind: document_link(rent, kind, t, date_format) for kind in DocumentKind}


async def download(client: RentApiClient, link: DocumentLink, t: Translate) -> DownloadedDocument:
    """Fetch the PDF behind ``link``; failures come back as a message."""
    response = await client.download_document(link.url)
    if not response.is_success:
        error = error_for_status(response.status_code, response.error)
        logger.warning(
            "Document download failed",
            extra={"document": link.kind.value, "status_code": response.status_code},
        )
        return DownloadedDocument(link.document_name, error=error, message=message_for(error, {}, t))
    return DownloadedDocument(link.document_name, content=response.data or b"")
