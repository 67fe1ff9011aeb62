"""EBSCOhost Integration Toolkit (EIT) search source adapter.

Vendor documentation is scattered; the useful pages are
http://support.ebsco.com/eit/ws.php, the FAQ at
http://support.ebsco.com/eit/ws_faq.php and the query syntax examples at
http://support.ebsco.com/eit/ws_howto_queries.php. The response DTD lives at
http://support.ebsco.com/eit/docs/DTD_EIT_WS_searchResponse.zip.

The account's default search operator must be set to 'and' in the EBSCO
admin console, otherwise multi-word queries run as phrase searches.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Callable
from urllib.parse import quote_plus

import httpx

from ebsco_search.config import EbscoHostConfig
from ebsco_search.models import (
    Author,
    DatabaseInfo,
    InfoResult,
    ItemFormat,
    ResultItem,
    SearchRequest,
    SearchResultSet,
    SortKey,
)
from ebsco_search.sources.base import SearchSource
from ebsco_search.sources.exceptions import (
    BadResponseError,
    InvalidArgumentError,
    RecoverableSearchError,
    ResponseParseError,
    SearchConfigurationError,
    SearchTimeoutError,
)
from ebsco_search.sources.xml_utils import has_children, node_text, parse_xml, text_if_present

logger = logging.getLogger(__name__)

# Only relevance and date are reliable in EBSCOhost cross-database search.
SORT_DEFINITIONS: dict[str, str] = {
    SortKey.RELEVANCE.value: "relevance",
    SortKey.DATE_DESC.value: "date",
}

# 'full' records cap at 50, but those carry fulltext and are never requested.
MAX_PER_PAGE = 200

_ABSTRACT_PREFIX = "Abstract: "
_PAREN_PATTERN = re.compile(r"[()]")
_PASSWORD_PATTERN = re.compile(r"pwd=[^&]*")
_LEADING_INT = re.compile(r"\s*(\d+)")
_WORD_START = re.compile(r"\b(?<!['’`])[a-z]")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


# ----------------------------------------------------------------------
# Query building
# ----------------------------------------------------------------------

def ebsco_query_escape(text: str) -> str:
    """Replace parentheses with spaces.

    EIT cannot escape parens and they break its query syntax. Removing
    them does not change what the search matches in practice.
    """
    return _PAREN_PATTERN.sub(" ", text)


def _credentials(config: EbscoHostConfig) -> str:
    return f"prof={quote_plus(config.profile_id)}&pwd={quote_plus(config.profile_password)}"


def build_query_url(config: EbscoHostConfig, request: SearchRequest) -> str:
    """Build the EIT Search URL for one request.

    Raises InvalidArgumentError for an unknown sort key or a page size
    above MAX_PER_PAGE.
    """
    # Relevance is our default, rather than EBSCO's date.
    sort = request.sort or SortKey.RELEVANCE.value
    sort_implementation = SORT_DEFINITIONS.get(sort)
    if sort_implementation is None:
        raise InvalidArgumentError(
            f"Unsupported sort {sort!r}; expected one of {sorted(SORT_DEFINITIONS)}"
        )
    if request.per_page is not None and request.per_page > MAX_PER_PAGE:
        raise InvalidArgumentError(
            f"per_page {request.per_page} exceeds maximum of {MAX_PER_PAGE}"
        )

    url = f"{config.base_url}/Search?{_credentials(config)}"
    url += f"&query={quote_plus(ebsco_query_escape(request.query))}"

    # startrec is 1-based for EBSCO.
    if request.start is not None:
        url += f"&startrec={request.start + 1}"
    if request.per_page is not None:
        url += f"&numrec={request.per_page}"

    url += f"&sort={sort_implementation}"

    # Contrary to the vendor docs, databases must be separate params.
    for db in config.databases:
        url += f"&db={quote_plus(db)}"

    return url


def build_info_url(config: EbscoHostConfig) -> str:
    return f"{config.base_url}/Info?{_credentials(config)}"


def redact_url(url: str) -> str:
    return _PASSWORD_PATTERN.sub("pwd=[REDACTED]", url)


# ----------------------------------------------------------------------
# Response parsing
# ----------------------------------------------------------------------

def _parse_body(body: bytes | str) -> ET.Element:
    try:
        return parse_xml(body)
    except ET.ParseError as exc:
        raise ResponseParseError(f"EBSCOhost returned malformed XML: {exc}") from exc


def _to_int(text: str | None) -> int | None:
    if text is None:
        return None
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_search_response(body: bytes | str) -> tuple[int, list[ET.Element]]:
    """Parse a Search response into (total hits, <rec> elements).

    A missing or non-numeric Hits node counts as zero hits; the vendor
    leaves it out of some error documents.
    """
    root = _parse_body(body)
    if root.tag != "searchResponse":
        logger.debug("Unexpected EBSCOhost root element <%s>, no results", root.tag)
        return 0, []

    total = _to_int(text_if_present(root, "Hits"))
    if total is None:
        logger.debug("EBSCOhost response has no usable Hits node, assuming 0")
        total = 0

    return total, root.findall("SearchResults/records/rec")


def parse_databases(root: ET.Element) -> list[DatabaseInfo]:
    """Databases advertised by an Info document (dbInfo/db elements)."""
    databases: list[DatabaseInfo] = []
    for db in root.iter("db"):
        short_name = db.get("shortName")
        if not short_name:
            continue
        databases.append(
            DatabaseInfo(short_name=short_name, long_name=db.get("longName") or None)
        )
    return databases


# ----------------------------------------------------------------------
# Record mapping
# ----------------------------------------------------------------------

# Publication and document type are not a usable controlled vocabulary,
# so the format is guessed from which info blocks carry data. Order matters.
FormatRule = tuple[Callable[[ET.Element | None], bool], ItemFormat]

FORMAT_RULES: tuple[FormatRule, ...] = (
    (lambda info: has_children(info, "bkinfo"), ItemFormat.BOOK),
    (lambda info: has_children(info, "dissinfo"), ItemFormat.DISSERTATION),
    (
        lambda info: has_children(info, "jinfo") and has_children(info, "artinfo"),
        ItemFormat.ARTICLE,
    ),
    (lambda info: has_children(info, "jinfo"), ItemFormat.SERIAL),
)


def sniff_format(
    info: ET.Element | None,
    rules: tuple[FormatRule, ...] = FORMAT_RULES,
) -> ItemFormat:
    """First matching rule wins; UNKNOWN when none match."""
    for predicate, outcome in rules:
        if predicate(info):
            return outcome
    return ItemFormat.UNKNOWN


def titlecase(text: str) -> str:
    """Capitalise each word; CamelCase runs are split into words first."""
    split = _CAMEL_BOUNDARY.sub(r"\1 \2", _ACRONYM_BOUNDARY.sub(r"\1 \2", text))
    lowered = split.replace("_", " ").strip().lower()
    return _WORD_START.sub(lambda m: m.group(0).upper(), lowered)


def sniff_format_str(info: ET.Element | None) -> str:
    """Human-readable format: publication type and document type combined."""
    pubtype = text_if_present(info, "artinfo/pubtype")
    doctype = text_if_present(info, "artinfo/doctype")

    components = [pubtype]
    if doctype != pubtype:
        components.append(doctype)

    return ": ".join(titlecase(c) for c in components if c)


def strip_abstract_prefix(abstract: str | None) -> str | None:
    if abstract is None:
        return None
    while abstract.startswith(_ABSTRACT_PREFIX):
        abstract = abstract[len(_ABSTRACT_PREFIX):]
    return abstract if abstract.strip() else None


def get_link(rec: ET.Element) -> str | None:
    return text_if_present(rec, "pdfLink") or text_if_present(rec, "plink")


def item_from_xml(rec: ET.Element) -> ResultItem:
    """Map one <rec> element to a ResultItem. Never raises on missing data."""
    info = rec.find("header/controlInfo")

    authors: list[Author] = []
    if info is not None:
        authors = [Author(display=node_text(au)) for au in info.findall("artinfo/aug/au")]

    return ResultItem(
        link=get_link(rec),
        issn=text_if_present(info, "jinfo/issn"),
        journal_title=text_if_present(info, "jinfo/jtl"),
        publisher=text_if_present(info, "pubinfo/pub"),
        # Records may list several ISBNs; first one only.
        isbn=text_if_present(info, "bkinfo/isbn"),
        year=text_if_present(info, "pubinfo/dt[@year]", attr="year"),
        volume=text_if_present(info, "pubinfo/vid"),
        issue=text_if_present(info, "pubinfo/iid"),
        title=text_if_present(info, "artinfo/tig/atl"),
        start_page=text_if_present(info, "artinfo/ppf"),
        doi=text_if_present(info, "artinfo/ui[@type='doi']"),
        abstract=strip_abstract_prefix(text_if_present(info, "artinfo/ab")),
        authors=authors,
        format=sniff_format(info),
        format_str=sniff_format_str(info),
    )


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------

class EbscoHostSource(SearchSource):
    """EBSCOhost EIT adapter: one GET per search, no retries."""

    def __init__(
        self,
        config: EbscoHostConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    @property
    def source_name(self) -> str:
        return "ebsco_host"

    @property
    def max_per_page(self) -> int:
        return MAX_PER_PAGE

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, url: str) -> bytes:
        """Issue one GET, translating recoverable httpx failures."""
        logger.debug("EBSCOhost request: %s", redact_url(url))
        try:
            response = await self._client.get(url, timeout=self.config.timeout_s)
        except httpx.TimeoutException as exc:
            raise SearchTimeoutError(
                f"EBSCOhost request timed out after {self.config.timeout_s}s"
            ) from exc
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
            raise SearchConfigurationError(f"EBSCOhost request misconfigured: {exc}") from exc
        except (httpx.RemoteProtocolError, httpx.DecodingError) as exc:
            raise BadResponseError(f"EBSCOhost sent a malformed response: {exc}") from exc

        status_code = response.status_code
        if not 200 <= status_code < 300:
            raise BadResponseError(f"EBSCOhost request failed with HTTP {status_code}")
        return response.content

    async def search(self, request: SearchRequest) -> SearchResultSet:
        url = build_query_url(self.config, request)

        try:
            body = await self._get(url)
            total, records = parse_search_response(body)
        except RecoverableSearchError as exc:
            logger.warning("Source '%s' failed (%s): %s", self.source_name, exc.kind, exc)
            return SearchResultSet.from_error(exc)

        items = [item_from_xml(rec) for rec in records]
        logger.info(
            "Source '%s' returned %d of %d hits for %r",
            self.source_name, len(items), total, request.query,
        )
        return SearchResultSet(items=items, total_items=total)

    async def fetch_info(self) -> InfoResult:
        """Call the Info service to see which databases the profile can search.

        Not used for searching. The namespace-stripped document is kept on
        the result for callers that need more than the database list.
        """
        try:
            body = await self._get(build_info_url(self.config))
            root = _parse_body(body)
        except RecoverableSearchError as exc:
            logger.warning("Source '%s' info failed (%s): %s", self.source_name, exc.kind, exc)
            return InfoResult.from_error(exc)

        return InfoResult(databases=parse_databases(root), document=root)
