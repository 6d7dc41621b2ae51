"""Turn a picked document into the byte stream that gets encrypted.

PDFs pass through untouched. Word ``.docx`` files are reduced to their
paragraph text and relabelled as ``.pdf``, the same text-as-PDF conversion
the web client performed. Anything else is rejected.
"""
import io
import logging
import zipfile
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree

from PyPDF2 import PdfReader

from journalseal.core.exceptions import NormalizationError
from journalseal.core.models import NormalizedDocument

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
PDF_MAGIC = b"%PDF-"
DOCX_BODY = "word/document.xml"
_W = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"

UNSUPPORTED_MESSAGE = "Please upload a PDF or Word (.docx) file"


class DocumentNormalizer:
    """ Default normalization collaborator used by the submission controller. """

    def normalize(self, raw: bytes, mime_type: Optional[str], filename: str) -> NormalizedDocument:
        mime_type = (mime_type or "").lower()
        suffix = Path(filename).suffix.lower()

        if mime_type == PDF_MIME or suffix == ".pdf":
            return self._normalize_pdf(raw, filename)

        if suffix == ".doc":
            raise NormalizationError("Legacy .doc files are not supported; save the file as .docx or PDF")

        if suffix == ".docx" or "word" in mime_type:
            return self._normalize_docx(raw, filename)

        raise NormalizationError(UNSUPPORTED_MESSAGE)

    def _normalize_pdf(self, raw: bytes, filename: str) -> NormalizedDocument:
        if not raw.startswith(PDF_MAGIC):
            raise NormalizationError(f"{filename} is not a valid PDF file")
        try:
            reader = PdfReader(io.BytesIO(raw))
            # pages of a password-protected PDF cannot be read without its password
            encrypted = reader.is_encrypted
            page_count = None if encrypted else len(reader.pages)
        except Exception as exc:
            raise NormalizationError(f"Could not read PDF {filename}: {exc}") from exc
        if page_count == 0:
            raise NormalizationError(f"{filename} has no pages")

        if encrypted:
            logger.debug("Password-protected PDF %s accepted (%d bytes)", filename, len(raw))
        else:
            logger.debug("PDF %s accepted (%d page(s), %d bytes)", filename, page_count, len(raw))
        return NormalizedDocument(data=raw, filename=filename, mime_type=PDF_MIME)

    def _normalize_docx(self, raw: bytes, filename: str) -> NormalizedDocument:
        try:
            with zipfile.ZipFile(io.BytesIO(raw)) as zf:
                body = zf.read(DOCX_BODY)
            root = ElementTree.fromstring(body)
        except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
            raise NormalizationError(f"Could not read Word document {filename}: {exc}") from exc

        text = "\n".join(_paragraph_text(p) for p in root.iter(f"{_W}p"))
        pdf_name = str(Path(filename).with_suffix(".pdf"))

        logger.debug("Converted %s to text (%d chars)", filename, len(text))
        return NormalizedDocument(data=text.encode("utf-8"), filename=pdf_name, mime_type=PDF_MIME)


def _paragraph_text(paragraph) -> str:
    # Runs keep their text in w:t; tabs and breaks are separate empty elements.
    parts = []
    for node in paragraph.iter():
        if node.tag == f"{_W}t":
            parts.append(node.text or "")
        elif node.tag == f"{_W}tab":
            parts.append("\t")
        elif node.tag in (f"{_W}br", f"{_W}cr"):
            parts.append("\n")
    return "".join(parts)
