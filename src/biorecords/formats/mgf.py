"""
Mascot Generic Format codec.

Scans are enclosed by ``BEGIN IONS`` and ``END IONS`` lines. Each section
starts with ``KEY=VALUE`` header lines followed by one peak per line. Peak lines
are parsed into a :py:class:`PeakList`. Header keys keep their case and are
matched case-insensitively.

The scan title and the header lines written depend on the tool that created the
file, see :py:class:`biorecords.core.constants.MgfKind`. Full MS scans written
by Pava have no sections: each scan starts with a ``Scan#:`` line followed by
five ``Key: value`` lines and tab-separated peaks, and ends with blank lines.

"""

from __future__ import annotations

import logging
import re

import numpy as np

from ..core.constants import BEGIN_IONS, END_IONS, DecodePolicy, MgfKind
from ..core.exceptions import Malformed, Unsorted, WrongArity
from ..core.numeric import format_float, format_float32, format_int, parse_float, parse_int
from ..core.peaks import PeakList
from ..core.registry import get_checker, register_codec
from ..core.stream import Boundary, DelimitedBoundary, PrefixBoundary, RawSpan
from ..core.validity import Checker, ValidationOutcome, apply_policy
from ..spectra.models import Spectrum

logger = logging.getLogger(__name__)

_TITLE_PATTERNS = {
    MgfKind.MSCONVERT: re.compile(
        r'(?P<file>.+?)\.(?P<num>[0-9]+)\.[0-9]+\.[0-9]* File:"[^"]*", NativeID:"[^"]*"'
    ),
    MgfKind.PAVA: re.compile(r"Scan (?P<num>[0-9]+) \(rt=(?P<rt>[^)]+)\) \[(?P<file>[^\]]*)\]"),
    MgfKind.PWIZ: re.compile(r"(?P<file>.+?) Spectrum[0-9]+ scans: (?P<num>[0-9]+)"),
}

_CHARGE = re.compile(r"([0-9]+)([+-]?)")

# header keys stored in dedicated fields
_KNOWN_KEYS = frozenset({"TITLE", "PEPMASS", "CHARGE", "RTINSECONDS", "SCANS", "MSLEVEL"})

# header lines of full MS scans, in file order
_FULLMS_KEYS = (
    "Scan#",
    "Ret.Time",
    "IonInjectionTime(ms)",
    "TotalIonCurrent",
    "BasePeakMass",
    "BasePeakIntensity",
)


@register_codec("mgf", suffixes=(".mgf",))
class MgfCodec:
    """
    Codec for MGF scans.

    Parameters
    ----------
    kind : MgfKind, default=MgfKind.GENERIC
        Flavour of the title and header lines.
    sort_peaks : bool, default=True
        If ``True``, peaks are sorted by m/z. Otherwise, out of order peaks are
        reported as malformed.
    dtype : numpy dtype, default=numpy.float64
        Intensity data type of decoded peak lists.
    checker : Checker or None, default=None
        Validity checks. If ``None``, the checker registered for
        :py:class:`Spectrum` is used.

    Notes
    -----
    pwiz titles contain the position of the scan in the file. The position is
    counted from the last call to :py:meth:`header`.

    """

    def __init__(
        self,
        kind: MgfKind = MgfKind.GENERIC,
        sort_peaks: bool = True,
        dtype=np.float64,
        checker: Checker | None = None,
    ):
        self.kind = MgfKind(kind)
        self.sort_peaks = sort_peaks
        self.dtype = np.dtype(dtype)
        self.checker = get_checker(Spectrum) if checker is None else checker
        self._position = 0

    def boundary(self) -> Boundary:
        if self.kind is MgfKind.FULLMS:
            return PrefixBoundary(f"{_FULLMS_KEYS[0]}:")
        return DelimitedBoundary(BEGIN_IONS, END_IONS)

    def decode(self, span: RawSpan, policy: DecodePolicy) -> tuple[Spectrum, ValidationOutcome]:
        if self.kind is MgfKind.FULLMS:
            fields, peak_lines = _parse_fullms_header(span.content)
        else:
            header = dict(span.context)
            peak_lines = list()
            for line in span.content:
                if line[:1].isalpha() and "=" in line:
                    key, _, value = line.partition("=")
                    header[key.strip()] = value.strip()
                else:
                    peak_lines.append(line)
            fields = self._parse_header(header)

        pairs = list()
        for line in peak_lines:
            try:
                pairs.append(_parse_peak(line))
            except Malformed:
                if policy is DecodePolicy.STRICT:
                    raise
                logger.warning("Dropping malformed peak line %r in scan %d.", line, span.index)

        try:
            if self.sort_peaks:
                peaks = PeakList.from_pairs_sorting(pairs, dtype=self.dtype)
            else:
                peaks = PeakList.from_pairs(pairs, dtype=self.dtype)
        except Unsorted as e:
            raise Malformed(str(e)) from e

        spectrum = Spectrum(peaks=peaks, **fields)
        outcome = apply_policy(self.checker.check(spectrum), policy)
        return spectrum, outcome

    def encode(self, record: Spectrum) -> bytes:
        if self.kind is MgfKind.FULLMS:
            return _encode_fullms(record)
        lines = [BEGIN_IONS]
        lines.extend(self._format_header(record))
        for key, value in record.params:
            lines.append(f"{key}={value}")
        delimiter = "\t" if self.kind is MgfKind.PAVA else " "
        format_intensity = format_float32 if record.peaks.dtype == np.float32 else format_float
        for mz, intensity in record.peaks:
            lines.append(f"{format_float(mz)}{delimiter}{format_intensity(intensity)}")
        lines.append(END_IONS)
        if self.kind in (MgfKind.PAVA, MgfKind.PWIZ):
            lines.append("")
        self._position += 1
        return ("\n".join(lines) + "\n").encode()

    def header(self) -> bytes:
        self._position = 0
        return b""

    def footer(self) -> bytes:
        return b""

    def _parse_header(self, params: dict[str, str]) -> dict:
        header = {k.upper(): v for k, v in params.items()}
        fields: dict = dict()
        if "PEPMASS" in header:
            values = header["PEPMASS"].split()
            if not values or len(values) > 2:
                raise WrongArity("PEPMASS", header["PEPMASS"], "expected m/z and intensity")
            fields["parent_mz"] = parse_float(values[0], "PEPMASS")
            if len(values) == 2:
                fields["parent_intensity"] = parse_float(values[1], "PEPMASS")
        if "CHARGE" in header:
            fields["parent_z"] = _parse_charge(header["CHARGE"])
        if "RTINSECONDS" in header:
            fields["rt"] = parse_float(header["RTINSECONDS"], "RTINSECONDS")
        if "SCANS" in header:
            first = header["SCANS"].split("-")[0].split(",")[0]
            fields["num"] = parse_int(first, "u32", "SCANS")
        if "MSLEVEL" in header:
            fields["ms_level"] = parse_int(header["MSLEVEL"], "u8", "MSLEVEL")

        title = header.get("TITLE", "")
        if self.kind is MgfKind.GENERIC:
            fields["title"] = title
        else:
            match = _TITLE_PATTERNS[self.kind].fullmatch(title)
            if match is None:
                raise Malformed(f"invalid {self.kind.value} title: {title!r}")
            fields["file"] = match.group("file")
            fields.setdefault("num", parse_int(match.group("num"), "u32", "TITLE"))
            if self.kind is MgfKind.PAVA:
                fields["rt"] = parse_float(match.group("rt"), "TITLE")

        fields["params"] = tuple((k, v) for k, v in params.items() if k.upper() not in _KNOWN_KEYS)
        return fields

    def _format_header(self, record: Spectrum) -> list[str]:
        lines = list()
        charge = _format_charge(record.parent_z)
        pepmass = format_float(record.parent_mz)
        if record.parent_intensity:
            delimiter = "\t" if self.kind is MgfKind.PAVA else " "
            pepmass += delimiter + format_float(record.parent_intensity)

        if self.kind is MgfKind.MSCONVERT:
            native_id = f"controllerType=0 controllerNumber=1 scan={record.num}"
            title = f'{record.file}.{record.num}.{record.num}.0 File:"{record.file}", NativeID:"{native_id}"'
            lines.append(f"TITLE={title}")
            lines.append(f"RTINSECONDS={format_float(record.rt)}")
            lines.append(f"PEPMASS={pepmass}")
            if charge:
                lines.append(f"CHARGE={charge}")
        elif self.kind is MgfKind.PAVA:
            lines.append(f"TITLE=Scan {record.num} (rt={format_float(record.rt)}) [{record.file}]")
            lines.append(f"PEPMASS={pepmass}")
            if charge:
                lines.append(f"CHARGE={charge}")
        elif self.kind is MgfKind.PWIZ:
            lines.append(f"TITLE={record.file} Spectrum{self._position} scans: {record.num}")
            lines.append(f"PEPMASS={pepmass}")
            if charge:
                lines.append(f"CHARGE={charge}")
            rt = format_int(record.rt) if float(record.rt).is_integer() else format_float(record.rt)
            lines.append(f"RTINSECONDS={rt}")
            lines.append(f"SCANS={record.num}")
        else:
            if record.title:
                lines.append(f"TITLE={record.title}")
            if record.parent_mz:
                lines.append(f"PEPMASS={pepmass}")
            if charge:
                lines.append(f"CHARGE={charge}")
            if record.rt:
                lines.append(f"RTINSECONDS={format_float(record.rt)}")
            if record.num:
                lines.append(f"SCANS={record.num}")
        if record.ms_level:
            lines.append(f"MSLEVEL={record.ms_level}")
        return lines


def _parse_fullms_header(lines: tuple[str, ...]) -> tuple[dict, tuple[str, ...]]:
    n = len(_FULLMS_KEYS)
    if len(lines) < n:
        raise Malformed(f"expected {n} header lines, found {len(lines)}")
    values = dict()
    for key, line in zip(_FULLMS_KEYS, lines):
        name, sep, value = line.partition(":")
        if not sep or name != key:
            raise Malformed(f"expected a {key!r} line, found {line!r}")
        values[key] = value.strip()
    fields = {
        "num": parse_int(values["Scan#"], "u32", "Scan#"),
        "rt": parse_float(values["Ret.Time"], "Ret.Time"),
    }
    return fields, lines[n:]


def _encode_fullms(record: Spectrum) -> bytes:
    format_intensity = format_float32 if record.peaks.dtype == np.float32 else format_float
    lines = [
        f"Scan#: {record.num}",
        f"Ret.Time: {format_float(record.rt)}",
        # injection time and ion current are not stored
        "IonInjectionTime(ms): 0.0",
        "TotalIonCurrent: 0",
    ]
    if len(record.peaks):
        base = int(np.argmax(record.peaks.intensity))
        lines.append(f"BasePeakMass: {format_float(record.peaks.mz[base])}")
        lines.append(f"BasePeakIntensity: {format_intensity(record.peaks.intensity[base])}")
    else:
        lines.append("BasePeakMass: 0.0")
        lines.append("BasePeakIntensity: 0.0")
    for mz, intensity in record.peaks:
        lines.append(f"{format_float(mz)}\t{format_intensity(intensity)}")
    return ("\n".join(lines) + "\n\n\n").encode()


def _parse_peak(line: str) -> tuple[float, float]:
    values = line.split()
    if len(values) not in (2, 3):
        raise WrongArity("peak", line, "expected m/z, intensity and optional charge")
    return parse_float(values[0], "mz"), parse_float(values[1], "intensity")


def _parse_charge(text: str) -> int:
    # multiple charges, e.g. "2+ and 3+", keep the first one
    match = _CHARGE.match(text.strip())
    if match is None:
        raise Malformed(f"invalid charge: {text!r}")
    value = parse_int(match.group(1), "i8", "CHARGE")
    return -value if match.group(2) == "-" else value


def _format_charge(charge: int) -> str:
    if not charge:
        return ""
    return f"{abs(charge)}{'-' if charge < 0 else '+'}"
