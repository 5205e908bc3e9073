"""Loading and saving packages through python-pptx.

python-pptx does the zip and XML work; these helpers only normalise the
accepted sources and targets.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import IO

import pptx
from pptx.exc import PackageNotFoundError

from deckgraph.errors import PackageCorruptError

logger = logging.getLogger(__name__)

Source = str | Path | bytes | IO[bytes] | None


def load(source: Source = None):
    """Open a python-pptx presentation from a path, bytes, a stream or nothing.

    ``None`` opens python-pptx's default (blank 4:3) template.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    elif isinstance(source, Path):
        source = str(source)
    if isinstance(source, str) and not Path(source).exists():
        raise FileNotFoundError(source)
    try:
        prs = pptx.Presentation(source)
    except (PackageNotFoundError, zipfile.BadZipFile) as exc:
        raise PackageCorruptError(f"not a presentation package: {exc}") from exc
    except KeyError as exc:
        raise PackageCorruptError(f"package is missing a required part: {exc}") from exc
    logger.debug("Loaded package from %s", source if isinstance(source, str) else type(source).__name__)
    return prs


def save(prs, target: str | Path | IO[bytes]) -> None:
    if isinstance(target, (str, Path)):
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        target = str(path)
    prs.save(target)


def to_bytes(prs) -> bytes:
    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()
