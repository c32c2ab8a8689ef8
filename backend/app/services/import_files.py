"""
Job import file readers.

Turns an uploaded (or downloaded) CSV/Excel file into the list of row dicts
consumed by ``app.services.job_import.import_jobs``. Every cell is read as a
string; interpreting the values is the importer's job.
"""
import asyncio
import ipaddress
import io
import logging
import socket
from pathlib import PurePosixPath
from typing import Dict, List, Optional
from urllib.parse import urlparse

import aiohttp
import pandas as pd
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.services.job_import import normalize_row_keys

logger = logging.getLogger(__name__)


CSV_ENCODINGS = ["utf-8", "utf-8-sig", "cp1252", "latin-1"]
EXCEL_EXTENSIONS = {".xlsx", ".xls"}
SUPPORTED_EXTENSIONS = {".csv"} | EXCEL_EXTENSIONS

CONTENT_TYPE_FORMATS = {
    "text/csv": "csv",
    "application/csv": "csv",
    "application/vnd.ms-excel": "excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "excel",
}


class ImportFileError(Exception):
    """Raised when an import file cannot be read"""
    pass


def detect_format(filename: str, content_type: str = "") -> str:
    """
    Return "csv" or "excel" from a file name, falling back to content type.

    Raises:
        ImportFileError: neither identifies a supported format
    """
    suffix = PurePosixPath(filename or "").suffix.lower()
    if suffix == ".csv":
        return "csv"
    if suffix in EXCEL_EXTENSIONS:
        return "excel"

    base_type = (content_type or "").split(";")[0].strip().lower()
    if base_type in CONTENT_TYPE_FORMATS:
        return CONTENT_TYPE_FORMATS[base_type]

    raise ImportFileError(
        f"Unsupported file type '{suffix or base_type or 'unknown'}'. "
        f"Upload one of: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
    )


def read_csv_with_fallbacks(content: bytes) -> pd.DataFrame:
    last_error: Optional[Exception] = None

    for enc in CSV_ENCODINGS:
        try:
            return pd.read_csv(
                io.BytesIO(content),
                encoding=enc,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except UnicodeDecodeError as exc:
            last_error = exc
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise ImportFileError(f"Could not parse CSV file: {exc}") from exc

    raise ImportFileError(
        f"Unable to decode CSV with supported encodings ({', '.join(CSV_ENCODINGS)}): {last_error}"
    )


def read_excel(content: bytes) -> pd.DataFrame:
    try:
        return pd.read_excel(io.BytesIO(content), dtype=str, keep_default_na=False)
    except Exception as exc:
        raise ImportFileError(f"Could not read Excel file: {exc}") from exc


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Optional[str]]]:
    """Rows with normalized header keys; fully blank rows are kept so they count as failed."""
    return [normalize_row_keys(record) for record in df.to_dict(orient="records")]


def read_job_rows(content: bytes, filename: str, content_type: str = "") -> List[Dict[str, Optional[str]]]:
    """
    Parse an import file into row dicts.

    Raises:
        ImportFileError: empty, unsupported, unreadable or too many rows
    """
    if not content:
        raise ImportFileError("The uploaded file is empty")

    file_format = detect_format(filename, content_type)
    df = read_csv_with_fallbacks(content) if file_format == "csv" else read_excel(content)

    if len(df) > settings.import_max_rows:
        raise ImportFileError(
            f"File has {len(df)} rows; at most {settings.import_max_rows} can be imported at once"
        )

    rows = dataframe_to_rows(df)
    logger.info(f"Read {len(rows)} rows from {filename or 'upload'} ({file_format})")
    return rows


def address_is_private_or_local(address: str) -> bool:
    ip = ipaddress.ip_address(address)
    return bool(
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


async def resolve_host(host: str, port: Optional[int] = None) -> List[str]:
    """Resolve a host name to its IP addresses without blocking the event loop."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    return [sockaddr[0] for _family, _type, _proto, _canon, sockaddr in infos]


async def ensure_public_url(url: str) -> None:
    """
    Reject URLs whose host is, or resolves to, a non-public address.

    Every resolved address is checked, so a name with one private record is
    rejected even if it also has public ones.

    Raises:
        ImportFileError: unsupported scheme, missing or unresolvable host, or
            a private, loopback, link-local or reserved address
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ImportFileError("Only http and https URLs can be imported")

    host = (parsed.hostname or "").strip().lower()
    if not host:
        raise ImportFileError("Import URL has no host")
    if host == "localhost" or host.endswith(".localhost") or host.endswith(".local"):
        raise ImportFileError("Private or local URLs are not allowed for import")

    try:
        addresses = [ipaddress.ip_address(host).compressed]
    except ValueError:
        try:
            addresses = await resolve_host(host, parsed.port)
        except OSError as e:
            raise ImportFileError(f"Could not resolve host '{host}'") from e

    # Strip IPv6 scope ids ("fe80::1%eth0")
    if not addresses or any(address_is_private_or_local(a.split("%")[0]) for a in addresses):
        logger.warning(f"Rejected import URL with non-public host: {host}")
        raise ImportFileError("Private or local URLs are not allowed for import")


async def download_import_file(url: str, session: aiohttp.ClientSession) -> tuple[bytes, str]:
    """
    Download an import file, enforcing the configured size limit.

    Only public hosts are fetched and redirects are not followed, so a
    public URL cannot bounce the request to an internal address.

    Returns (content, content_type).
    """
    await ensure_public_url(url)

    timeout = aiohttp.ClientTimeout(total=settings.import_fetch_timeout_seconds)
    headers = {"User-Agent": "CareersPageBuilder/1.0 (job import)"}
    max_bytes = settings.import_max_file_bytes

    async with session.get(url, headers=headers, timeout=timeout, allow_redirects=False) as resp:
        if resp.status != 200:
            logger.warning(f"Import download failed: {url} returned {resp.status}")
            raise ImportFileError(f"Could not download file (HTTP {resp.status})")

        if resp.content_length is not None and resp.content_length > max_bytes:
            raise ImportFileError(f"File is larger than {max_bytes} bytes")

        chunks = []
        size = 0
        async for chunk in resp.content.iter_chunked(64 * 1024):
            size += len(chunk)
            if size > max_bytes:
                raise ImportFileError(f"File is larger than {max_bytes} bytes")
            chunks.append(chunk)

        return b"".join(chunks), resp.headers.get("Content-Type", "")


async def fetch_job_rows(url: str) -> List[Dict[str, Optional[str]]]:
    """Download a CSV/Excel file and parse it into row dicts."""
    filename = PurePosixPath(urlparse(url).path).name

    try:
        async with aiohttp.ClientSession() as session:
            content, content_type = await download_import_file(url, session)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Import download error for {url}: {type(e).__name__}: {e}")
        raise ImportFileError(f"Could not download file: {e}") from e

    # pandas parsing is CPU-bound
    return await run_in_threadpool(read_job_rows, content, filename, content_type)
