"""
Retrieve UniProtKB entries from the UniProt REST API.

fetch : Download entries by accession.
search : Download entries matching a query.
download : Save entries to a file.

"""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Final, Sequence

import requests

from ..core.codec import DecodeSession
from ..core.constants import DecodePolicy
from ..core.registry import get_codec
from ..core.settings import get_settings

logger = logging.getLogger(__name__)

# API format name to codec name
FORMATS: Final[dict[str, str]] = {
    "txt": "uniprot-text",
    "fasta": "uniprot-fasta",
    "xml": "uniprot-xml",
}


def fetch(accessions: Sequence[str], format: str = "txt") -> bytes:
    """
    Download entries by accession.

    Parameters
    ----------
    accessions : Sequence[str]
        Primary accessions, e.g. ``["P46406", "P02769"]``.
    format : {"txt", "fasta", "xml"}, default="txt"

    Returns
    -------
    bytes
        Response content.

    Raises
    ------
    requests.HTTPError
        If the server responds with an error status.

    """
    _check_format(format)
    params = {"accessions": ",".join(accessions), "format": format}
    return _get("accessions", params)


def search(query: str, format: str = "txt", policy: DecodePolicy | None = None) -> DecodeSession:
    """
    Download and decode entries matching a query.

    Parameters
    ----------
    query : str
        UniProt query, e.g. ``"gene:GAPDH AND reviewed:true"``.
    format : {"txt", "fasta", "xml"}, default="txt"
    policy : DecodePolicy or None, default=None
        Decode policy. If ``None``, the value from the library settings is used.

    Returns
    -------
    DecodeSession

    """
    _check_format(format)
    content = _get("stream", {"query": query, "format": format})
    return DecodeSession(content, get_codec(FORMATS[format]), policy=policy)


def download(accessions: Sequence[str], path: str | os.PathLike, format: str = "txt") -> pathlib.Path:
    """
    Save entries to a file.

    Parameters
    ----------
    accessions : Sequence[str]
    path : str or os.PathLike
        Output file. Existing files are overwritten.
    format : {"txt", "fasta", "xml"}, default="txt"

    Returns
    -------
    pathlib.Path

    """
    path = pathlib.Path(path)
    content = fetch(accessions, format=format)
    with path.open("wb") as fout:
        fout.write(content)
    return path


def _get(endpoint: str, params: dict) -> bytes:
    settings = get_settings()
    url = f"{settings.uniprot_url}/{endpoint}"
    logger.info("Requesting %s with %s.", url, params)
    r = requests.get(url, params=params, timeout=settings.request_timeout)
    r.raise_for_status()
    return r.content


def _check_format(format: str):
    if format not in FORMATS:
        msg = "Invalid format. Available formats are: {}"
        raise ValueError(msg.format(list(FORMATS)))
