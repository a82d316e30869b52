"""Mass spectrometry scan records."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import pydantic

from ..core.models import Record
from ..core.peaks import PeakList
from ..core.registry import register_checker
from ..core.validity import Checker, RecordValidator


def _empty_peaks() -> PeakList:
    return PeakList([], [])


class Spectrum(Record):
    """
    A mass spectrometry scan.

    Attributes
    ----------
    num : int
        Scan number.
    ms_level : int
        MS level. ``0`` if unknown.
    rt : float
        Retention time, in seconds.
    parent_mz : float
        Precursor m/z. ``0`` for MS1 scans.
    parent_intensity : float
        Precursor intensity.
    parent_z : int
        Precursor charge, with sign.
    file : str
        Name of the raw data file the scan was acquired in.
    filter : str
        Instrument scan filter.
    title : str
        Free text title, used by generic MGF files.
    peaks : PeakList
    params : tuple[tuple[str, str], ...]
        Additional (key, value) parameters.

    """

    num: int = 0
    ms_level: int = 0
    rt: float = 0.0
    parent_mz: float = 0.0
    parent_intensity: float = 0.0
    parent_z: int = 0
    file: str = ""
    filter: str = ""
    title: str = ""
    peaks: PeakList = pydantic.Field(default_factory=_empty_peaks)
    params: tuple[tuple[str, str], ...] = ()

    def to_document(self) -> dict[str, Any]:
        document = self.model_dump(exclude={"peaks"})
        document["peaks"] = self.peaks
        return document


class SpectrumValidator(RecordValidator):
    """Validator with the scan specific rules."""

    def _validate_not_empty(self, flag, field, value):
        """
        Tests if a peak list has at least one peak.

        The rule's arguments are validated against this schema:
        {"type": "boolean"}
        """
        if flag and not len(value):
            self._error(field, "peak list is empty")

    def _validate_precursor(self, flag, field, value):
        """
        Tests precursor fields against the MS level.

        MSn scans need a precursor m/z, intensity and charge. MS1 scans must
        not have any precursor information. Scans with unknown level pass.

        The rule's arguments are validated against this schema:
        {"type": "boolean"}
        """
        if not flag:
            return
        mz = self.document.get("parent_mz", 0.0)
        intensity = self.document.get("parent_intensity", 0.0)
        charge = self.document.get("parent_z", 0)
        if value >= 2:
            if not mz:
                self._error("parent_mz", "MSn scans need a precursor m/z")
            if not intensity > 0.0:
                self._error("parent_intensity", "MSn scans need a positive precursor intensity")
            if not charge:
                self._error("parent_z", "MSn scans need a precursor charge")
        elif value == 1 and (mz or intensity or charge):
            self._error(field, "MS1 scans cannot have precursor information")


SPECTRUM_SCHEMA = {
    "num": {"type": "integer", "nonzero": True},
    "ms_level": {"type": "integer", "min": 0, "precursor": True},
    "rt": {"type": "float", "nonzero": True},
    "parent_z": {"type": "integer"},
    "peaks": {"not_empty": True},
}

SPECTRUM_CHECKER = register_checker(Spectrum, Checker(SPECTRUM_SCHEMA, SpectrumValidator))

_COMPLETE_SCHEMA = deepcopy(SPECTRUM_SCHEMA)
_COMPLETE_SCHEMA["ms_level"]["min"] = 1
_COMPLETE_SCHEMA["filter"] = {"type": "string", "empty": False}

COMPLETE_CHECKER = Checker(_COMPLETE_SCHEMA, SpectrumValidator)


def is_complete(spectrum: Spectrum) -> bool:
    """Check if a scan is valid and has a known MS level and a scan filter."""
    return COMPLETE_CHECKER.check(spectrum).is_valid
