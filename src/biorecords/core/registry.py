"""Register utilities for codecs and record checkers."""

from __future__ import annotations

import os
import pathlib
from typing import Callable, TypeVar

from . import exceptions
from .models import Record
from .validity import Checker

CodecFactory = TypeVar("CodecFactory", bound=Callable)

_REGISTERED_CODECS: dict[str, Callable] = dict()
_REGISTERED_SUFFIXES: dict[str, str] = dict()
_REGISTERED_CHECKERS: dict[type[Record], Checker] = dict()


def get_codec(name: str, **kwargs):
    """
    Create a codec from the registry.

    Parameters
    ----------
    name : str
        The name of the codec.
    **kwargs
        Parameters passed to the codec factory.

    Returns
    -------
    Codec

    Raises
    ------
    CodecNotRegistered
        If a non-registered codec is requested.

    """
    try:
        factory = _REGISTERED_CODECS[name]
    except KeyError as e:
        raise exceptions.CodecNotRegistered(name) from e
    return factory(**kwargs)


def get_codec_for_path(path: str | os.PathLike, **kwargs):
    """
    Create a codec using the file suffix.

    A ``.gz`` suffix is ignored, e.g. ``reads.fastq.gz`` uses the FASTQ codec.

    Raises
    ------
    CodecNotRegistered
        If no codec is registered for the file suffix.

    """
    suffixes = [x.lower() for x in pathlib.Path(path).suffixes if x.lower() != ".gz"]
    if not suffixes:
        raise exceptions.CodecNotRegistered(str(path))
    try:
        name = _REGISTERED_SUFFIXES[suffixes[-1]]
    except KeyError as e:
        raise exceptions.CodecNotRegistered(suffixes[-1]) from e
    return get_codec(name, **kwargs)


def list_codecs() -> list[str]:
    """Retrieve the list of registered codec names."""
    return list(_REGISTERED_CODECS)


def register_codec(name: str, suffixes: tuple[str, ...] = ()) -> Callable[[CodecFactory], CodecFactory]:
    """
    Register a codec factory into the codec registry.

    Parameters
    ----------
    name : str
        Name used to retrieve the codec.
    suffixes : tuple[str, ...], default=()
        File suffixes, including the dot, that are decoded with this codec
        when the format is inferred from a path.

    Returns
    -------
    Callable
        A decorator that registers a codec class or factory function.

    """

    def decorator(factory: CodecFactory) -> CodecFactory:
        _REGISTERED_CODECS[name] = factory
        for suffix in suffixes:
            _REGISTERED_SUFFIXES[suffix.lower()] = name
        return factory

    return decorator


def get_checker(record_type: type[Record]) -> Checker:
    """
    Retrieve the checker of a record type.

    Checkers registered for a parent class are used by subclasses.

    Raises
    ------
    CheckerNotRegistered
        If no checker is registered for the record type.

    """
    for cls in record_type.__mro__:
        if cls in _REGISTERED_CHECKERS:
            return _REGISTERED_CHECKERS[cls]
    raise exceptions.CheckerNotRegistered(record_type.__name__)


def register_checker(record_type: type[Record], checker: Checker) -> Checker:
    """
    Register the checker of a record type.

    Parameters
    ----------
    record_type : type[Record]
    checker : Checker

    Returns
    -------
    Checker

    """
    _REGISTERED_CHECKERS[record_type] = checker
    return checker
