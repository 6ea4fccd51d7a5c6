"""
Image encode pipeline.

Turns a user-selected file into a self-contained data URI. Reading happens
off the event loop; the result is delivered once per request through a
completion callback, as a success or a failure.
"""

import asyncio
import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class EncodeResult:
    """Completion value of one encode request."""
    source: str
    data_uri: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data_uri is not None


Completion = Callable[[EncodeResult], None]


def to_data_uri(payload: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Encode raw bytes as `data:<mime>;base64,<payload>`."""
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


def guess_mime_type(path: Union[Path, str]) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME_TYPE


def _read_file(path: Path) -> bytes:
    if not path.is_file():
        raise FileNotFoundError(f"Not a file: {path}")
    return path.read_bytes()


async def _encode(path: Path) -> EncodeResult:
    try:
        payload = await asyncio.to_thread(_read_file, path)
    except OSError as e:
        logger.error(f"Failed to read image {path}: {e}")
        return EncodeResult(source=str(path), error=str(e))

    uri = to_data_uri(payload, guess_mime_type(path))
    logger.info(f"Encoded image {path.name} ({len(payload)} bytes)")
    return EncodeResult(source=str(path), data_uri=uri)


def encode_image(path: Union[Path, str], on_complete: Completion) -> "asyncio.Task[EncodeResult]":
    """
    Start encoding `path` on the running event loop.

    `on_complete` is called exactly once with the EncodeResult. The caller
    is not blocked; concurrent requests may finish in any order. Must be
    called from within a running loop.
    """
    async def run() -> EncodeResult:
        result = await _encode(Path(path).expanduser())
        try:
            on_complete(result)
        except Exception as e:
            logger.error(f"Image completion callback failed for {path}: {e}")
        return result

    return asyncio.get_running_loop().create_task(run())


async def encode_image_async(path: Union[Path, str]) -> EncodeResult:
    """Await the encode result directly, without a callback."""
    return await _encode(Path(path).expanduser())
