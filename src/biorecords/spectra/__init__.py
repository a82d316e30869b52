"""Mass spectrometry scan records."""

from .models import SPECTRUM_CHECKER, Spectrum, is_complete

__all__ = ["SPECTRUM_CHECKER", "Spectrum", "is_complete"]
