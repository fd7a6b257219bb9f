"""
Multipart/form-data decoding for the upload handler.

Wraps Starlette's ``MultiPartParser`` (backed by python-multipart) and spools
every file part to a named temp file, so callers get a real path plus the
client's original filename for each upload.
"""
import contextlib
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Mapping, Optional, Tuple, Union

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import Headers, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from upload_api.errors import UploadParseError

logger = logging.getLogger(__name__)

RequestBody = Union[bytes, AsyncIterator[bytes]]


@dataclass
class ParsedFile:
    """A file part spooled to disk."""

    field_name: str
    filepath: str
    original_filename: str
    content_type: Optional[str] = None
    size: int = 0


@dataclass
class ParsedForm:
    """Result of a successful parse: plain fields and spooled files, keyed by field name."""

    fields: Dict[str, List[str]] = field(default_factory=dict)
    files: Dict[str, List[ParsedFile]] = field(default_factory=dict)

    def get_file(self, field_name: str) -> Optional[ParsedFile]:
        """First file under ``field_name`` that carries a filename."""
        for parsed_file in self.files.get(field_name, []):
            if parsed_file.original_filename:
                return parsed_file
        return None

    def cleanup(self) -> None:
        """Remove every spooled temp file."""
        for parsed_files in self.files.values():
            for parsed_file in parsed_files:
                with contextlib.suppress(FileNotFoundError):
                    os.remove(parsed_file.filepath)


async def _as_stream(body: RequestBody) -> AsyncIterator[bytes]:
    if isinstance(body, (bytes, bytearray)):
        yield bytes(body)
        return
    async for chunk in body:
        yield chunk


def _spool_to_disk(upload: UploadFile, upload_dir: Optional[str]) -> Tuple[str, int]:
    upload.file.seek(0)
    with tempfile.NamedTemporaryFile(prefix="upload_", dir=upload_dir, delete=False) as tmp:
        shutil.copyfileobj(upload.file, tmp)
        return tmp.name, tmp.tell()


async def parse_multipart(
    headers: Mapping[str, str],
    body: RequestBody,
    upload_dir: Optional[str] = None,
) -> ParsedForm:
    """
    Decode a multipart body into a :class:`ParsedForm`.

    :param headers: Request headers; must carry a multipart ``Content-Type`` with a boundary.
    :param body: The raw body, either whole or as an async stream of chunks.
    :param upload_dir: Where to spool file parts; the system temp dir if ``None``.
    :raises UploadParseError: If the body is not valid multipart/form-data or a
        file part cannot be written to ``upload_dir``.
    """
    parser = MultiPartParser(Headers(headers=dict(headers)), _as_stream(body))
    try:
        form = await parser.parse()
    except (MultiPartException, KeyError, ValueError, OSError) as e:
        logger.warning(f"Multipart parse failed: {e}")
        raise UploadParseError() from e

    parsed = ParsedForm()
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                filepath, size = await run_in_threadpool(_spool_to_disk, value, upload_dir)
                parsed.files.setdefault(key, []).append(
                    ParsedFile(
                        field_name=key,
                        filepath=filepath,
                        original_filename=value.filename or "",
                        content_type=value.content_type,
                        size=size,
                    )
                )
            else:
                parsed.fields.setdefault(key, []).append(value)
    except OSError as e:
        parsed.cleanup()
        logger.warning(f"Could not spool upload part: {e}")
        raise UploadParseError() from e
    finally:
        await form.close()

    logger.debug(
        f"Parsed multipart body: fields={list(parsed.fields)} files={list(parsed.files)}"
    )
    return parsed
