"""
PDF Adapters

Implements DocumentSource with httpx and PdfTextExtractor with PyMuPDF.
"""
import logging
from pathlib import Path
from typing import Optional

import fitz
import httpx

from ..core.documents import MAX_DOCUMENT_BYTES
from ..core.ports import DocumentSource, PdfTextExtractor

logger = logging.getLogger(__name__)

# IR sites commonly reject non-browser clients
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DOWNLOAD_TIMEOUT = 60.0


class HttpDocumentSource(DocumentSource):
    """Document bytes over HTTP(S) or from disk, size-capped"""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        max_bytes: int = MAX_DOCUMENT_BYTES,
        timeout: float = DOWNLOAD_TIMEOUT
    ):
        self.client = client or httpx.Client(follow_redirects=True)
        self.max_bytes = max_bytes
        self.timeout = timeout

    def download(self, url: str) -> bytes:
        headers = {"User-Agent": BROWSER_USER_AGENT, "Accept": "application/pdf,*/*"}
        chunks = []
        size = 0
        try:
            with self.client.stream("GET", url, headers=headers, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise ValueError(f"PDF download failed: HTTP {response.status_code}")
                for chunk in response.iter_bytes():
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise ValueError(f"Document exceeds the {self.max_bytes:,} byte limit")
                    chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise ValueError(f"Timed out after {self.timeout:.0f}s downloading {url}: {str(e)}")

        logger.debug(f"Downloaded {size} bytes from {url}")
        return b"".join(chunks)

    def read(self, path: str) -> bytes:
        return Path(path).read_bytes()


class PyMuPdfExtractor(PdfTextExtractor):
    """PDF text via PyMuPDF, pages joined by newlines"""

    def extract(self, pdf_bytes: bytes) -> tuple[str, int]:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            text = "\n".join(page.get_text() for page in doc).strip()
            return text, doc.page_count
