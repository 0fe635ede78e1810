"""
Document Provider: turns a URL, a file or an HTML string into a Document.

Fetches static HTML (no JavaScript rendering), decodes it with the charset the
page declares, sanitizes common string-level malformations and parses it.

Design principle: NEVER FAIL on bad HTML. Parsing falls back through
html5lib → lxml → html.parser; only an unreachable target or a tree that no
parser can build raises.

Configuration (constructor arguments win over environment):
  SCHEMASNIFF_USER_AGENT  User-Agent header for HTTP fetches
  SCHEMASNIFF_TIMEOUT     Request timeout in seconds (default 30)
"""

import os
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse

import requests
from bs4 import BeautifulSoup, Comment

from .document import Document
from .exceptions import DocumentUnavailableError, InvalidInputError
from .logger import get_module_logger

logger = get_module_logger("provider")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 schemasniff/0.1"
)
DEFAULT_TIMEOUT = 30.0

# Parser fallback chain: html5lib builds the same tree a browser would
# (implicit <tbody>, reparented misnested tags), lxml is fast and tolerant,
# html.parser is always available.
PARSERS = ('html5lib', 'lxml', 'html.parser')

# Labels browsers decode as a different charset.
# https://encoding.spec.whatwg.org/#names-and-labels
BROWSER_CHARSET_ALIASES = dict(
    [(label, 'windows-1252') for label in (
        'iso-8859-1', 'iso8859-1', 'iso88591', 'latin-1', 'latin1', 'us-ascii', 'ascii'
    )]
    + [('iso-8859-9', 'windows-1254'), ('iso-8859-11', 'windows-874')]
)

# <meta charset=...> first, then <meta http-equiv="Content-Type" content="...; charset=...">
META_CHARSET_PATTERNS = (
    re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE),
    re.compile(r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)', re.IGNORECASE),
)
CHARSET_SNIFF_BYTES = 2048

# (pattern, replacement, warning), applied in order
SANITIZE_RULES = (
    (re.compile('\x00'), '', "Removed NULL bytes"),
    # <<p>> from copy-paste corruption
    (re.compile(r'<{2,}(\/?[a-zA-Z][^>]*?)>{2,}'), r'<\1>', "Fixed double angle brackets"),
    # href=="/path", a common CMS bug
    (re.compile(r'(\w+)==(["\'])'), r'\1=\2', "Fixed malformed attributes (double equals)"),
)
# C0 controls except tab and newline
CONTROL_CHARS = re.compile('[\x01-\x08\x0b\x0c\x0e-\x1f]')


class DocumentProvider:
    """Loads pages into Document handles."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.user_agent = user_agent or os.getenv("SCHEMASNIFF_USER_AGENT") or DEFAULT_USER_AGENT
        self.timeout = timeout if timeout is not None else float(
            os.getenv("SCHEMASNIFF_TIMEOUT", DEFAULT_TIMEOUT)
        )
        self.session = session or requests.Session()

    @staticmethod
    def declared_charset(raw_bytes: bytes) -> Optional[str]:
        """
        Charset from <meta charset=...> or <meta http-equiv="Content-Type">
        in the first 2048 bytes, after WHATWG remapping; None if undeclared.
        """
        head = raw_bytes[:CHARSET_SNIFF_BYTES].decode('ascii', errors='ignore')
        for pattern in META_CHARSET_PATTERNS:
            match = pattern.search(head)
            if match:
                label = match.group(1).strip().lower()
                return BROWSER_CHARSET_ALIASES.get(label, label)
        return None

    @staticmethod
    def detect_charset_from_bytes(raw_bytes: bytes, fallback: str = 'utf-8') -> str:
        return DocumentProvider.declared_charset(raw_bytes) or fallback

    @staticmethod
    def header_charset(response: requests.Response) -> Optional[str]:
        """
        Charset named in the Content-Type header, after browser remapping.

        requests reports ISO-8859-1 for any text/* response without a charset
        parameter; that default is ignored.
        """
        content_type = response.headers.get('Content-Type', '').lower()
        if 'charset' not in content_type or not response.encoding:
            return None
        label = response.encoding.strip().lower()
        return BROWSER_CHARSET_ALIASES.get(label, label)

    @staticmethod
    def decode(raw_bytes: bytes, charset: str) -> str:
        try:
            return raw_bytes.decode(charset, errors='replace')
        except LookupError:
            logger.warning(f"Unknown charset '{charset}', decoding as utf-8")
            return raw_bytes.decode('utf-8', errors='replace')

    def load(self, target: Union[str, Path]) -> Document:
        """Load from an http(s) URL or a local file path."""
        target_str = str(target)
        scheme = urlparse(target_str).scheme.lower()
        if scheme in ('http', 'https'):
            return self.from_url(target_str)
        if scheme == 'file':
            return self.from_file(unquote(urlparse(target_str).path))
        path = Path(target_str)
        if path.is_file():
            return self.from_file(path)
        raise InvalidInputError.invalid_target(target_str)

    def from_url(self, url: str) -> Document:
        """Fetch a page over HTTP and parse it."""
        parsed = urlparse(url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise InvalidInputError.invalid_target(url)

        logger.info(f"Fetching {url}")
        try:
            response = self.session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DocumentUnavailableError.navigation_error(url, e) from e

        if not response.ok:
            raise DocumentUnavailableError.page_load_failed(response.status_code, url)

        raw_bytes = response.content
        # Declared <meta> charset first, then an explicit Content-Type charset
        charset = self.declared_charset(raw_bytes) or self.header_charset(response) or 'utf-8'
        logger.debug(f"Decoding {len(raw_bytes)} bytes as {charset}")
        return self.from_html(self.decode(raw_bytes, charset), url=response.url or url)

    def from_file(self, file_path: Union[str, Path], url: Optional[str] = None) -> Document:
        """Read a saved HTML file; the document url defaults to the file URI."""
        file_path = Path(file_path)
        try:
            raw_bytes = file_path.read_bytes()
        except OSError as e:
            raise DocumentUnavailableError.navigation_error(str(file_path), e) from e

        html = self.decode(raw_bytes, self.detect_charset_from_bytes(raw_bytes))
        return self.from_html(html, url=url or file_path.resolve().as_uri())

    def from_html(self, html: str, url: str = "") -> Document:
        """Sanitize and parse an HTML string."""
        sanitized, warnings = self.sanitize_html(html)
        for warning in warnings:
            logger.debug(warning)

        soup = self._parse(sanitized, url or "<string>")
        self._remove_comments(soup)
        return Document(soup, url=url)

    def _parse(self, html: str, source: str) -> BeautifulSoup:
        last_error: Optional[Exception] = None
        for parser in PARSERS:
            try:
                return BeautifulSoup(html, parser)
            except Exception as e:
                # FeatureNotFound or a parser bug: try the next one
                logger.warning(f"{parser} parsing failed for {source}: {e}")
                last_error = e
        raise DocumentUnavailableError.parse_error(source, last_error)

    def sanitize_html(self, html: str) -> tuple[str, list[str]]:
        """
        Repair string-level breakage before parsing.

        Returns:
            (sanitized HTML, warnings describing each repair applied)
        """
        warnings = []
        for pattern, replacement, warning in SANITIZE_RULES:
            html, fixes = pattern.subn(replacement, html)
            if fixes:
                warnings.append(warning)

        html = html.replace('\r\n', '\n').replace('\r', '\n')

        html, removed = CONTROL_CHARS.subn('', html)
        if removed:
            warnings.append("Removed control characters")

        return html, warnings

    def _remove_comments(self, soup: BeautifulSoup) -> int:
        """Drop comment nodes so they never reach text or samples."""
        removed = 0
        for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
            comment.extract()
            removed += 1
        return removed


def load_document(target: Union[str, Path]) -> Document:
    """Convenience function to load a URL or file."""
    return DocumentProvider().load(target)


def load_html(html: str, url: str = "") -> Document:
    """Convenience function to parse an HTML string."""
    return DocumentProvider().from_html(html, url=url)
