"""Executable loading."""

from pathlib import Path
from typing import Union

from .core.exceptions import InputTooSmallError
from .core.logger import get_logger

logger = get_logger(__name__)

PSX_EXE_MAGIC = b"PS-X EXE"


def split_executable(data: bytes, header_size: int = 0x800, source: Union[str, Path] = "<memory>") -> bytes:
    """Strip the executable header and return the code image.

    Raises:
        InputTooSmallError: If nothing follows the header.
    """
    if len(data) <= header_size:
        raise InputTooSmallError(
            f"file too small: {source} is {len(data)} bytes, header alone is {header_size}",
            path=Path(source) if not isinstance(source, Path) else source,
            size=len(data),
            required=header_size + 1
        )

    if not data.startswith(PSX_EXE_MAGIC):
        logger.warning(f"{source} has no PS-X EXE header magic, scanning anyway")

    return data[header_size:]


def load_executable(path: Union[str, Path], header_size: int = 0x800) -> bytes:
    """Read an executable from disk and return its code image.

    Raises:
        InputTooSmallError: If the file is not larger than its header.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    data = path.read_bytes()
    logger.debug(f"Loaded {path} ({len(data)} bytes)")
    return split_executable(data, header_size, path)
