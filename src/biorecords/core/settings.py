"""
Library settings.

Default values used by codecs and clients when no explicit argument is given.
Settings are read once from the JSON file named by the ``BIORECORDS_SETTINGS``
environment variable. If the variable is not set, the defaults are used.

"""

from __future__ import annotations

import json
import logging
import os
import pathlib
from functools import lru_cache

import pydantic

from .constants import (
    CSV_CHUNKSIZE,
    FASTA_WIDTH,
    SETTINGS_ENV,
    TEXT_WIDTH,
    UNIPROT_URL,
    CsvSchema,
    DecodePolicy,
)

logger = logging.getLogger(__name__)


class Settings(pydantic.BaseModel):
    """
    Library defaults.

    Attributes
    ----------
    policy : DecodePolicy, default=DecodePolicy.STRICT
        Decode policy used by sessions created without an explicit policy.
    fasta_width : int, default=60
        Column where FASTA sequence lines are wrapped.
    text_width : int, default=75
        Maximum value width of flat text lines.
    csv_chunksize : int, default=1
        Number of rows read at once from tabular sources.
    csv_schema : CsvSchema, default=CsvSchema.V2
        Column layout used when writing UniProt tabular files.
    compression_tolerance : float, default=0.0
        Default absolute tolerance of compressed peak lists.
    uniprot_url : str
        Base URL of the UniProt REST API.
    request_timeout : float, default=30.0
        Timeout of network requests, in seconds.

    """

    model_config = pydantic.ConfigDict(frozen=True)

    policy: DecodePolicy = DecodePolicy.STRICT
    fasta_width: pydantic.PositiveInt = FASTA_WIDTH
    text_width: pydantic.PositiveInt = TEXT_WIDTH
    csv_chunksize: pydantic.PositiveInt = CSV_CHUNKSIZE
    csv_schema: CsvSchema = CsvSchema.V2
    compression_tolerance: pydantic.NonNegativeFloat = 0.0
    uniprot_url: str = UNIPROT_URL
    request_timeout: pydantic.PositiveFloat = 30.0


def load_settings(path: str | os.PathLike) -> Settings:
    """
    Read settings from a JSON file.

    Parameters
    ----------
    path : str or os.PathLike

    Returns
    -------
    Settings

    Raises
    ------
    pydantic.ValidationError
        If the file contains invalid values.

    """
    path = pathlib.Path(path)
    with path.open() as fin:
        values = json.load(fin)
    logger.debug("Loaded settings from %s.", path)
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retrieve the process settings."""
    path = os.environ.get(SETTINGS_ENV)
    if path:
        return load_settings(path)
    return Settings()
