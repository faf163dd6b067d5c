"""Derives the engine processing configuration from a dataset."""

from typing import Any

from loguru import logger as log

from smdataset.models.datasets import Dataset
from smdataset.utils import get_in

POLARITY_SIGNS: dict[str, str] = {"Positive": "+", "Negative": "-"}
DEFAULT_ADDUCTS: dict[str, list[str]] = {
    "+": ["+H", "+Na", "+K"],
    "-": ["-H", "+Cl"],
}
# full width at half maximum -> gaussian sigma
FWHM_TO_SIGMA: float = 2.3548
REFERENCE_MZ: float = 200.0

IMAGE_GENERATION_DEFAULTS: dict[str, Any] = {
    "ppm": 3.0,
    "nlevels": 30,
    "q": 99,
    "do_preprocessing": False,
}
ISOCALC_PTS_PER_MZ: int = 4000


def resolving_power_at_reference(
    analyzer: str,
    mz: float,
    resolving_power: float,
) -> float:
    """Resolving power at m/z 200, scaled by how the analyzer's RP varies with m/z."""
    analyzer = analyzer.lower()
    if "fticr" in analyzer or "ft-icr" in analyzer:
        return resolving_power * mz / REFERENCE_MZ
    if "orbitrap" in analyzer:
        return resolving_power * (mz / REFERENCE_MZ) ** 0.5
    return resolving_power


def isocalc_sigma(metadata: dict[str, Any]) -> float:
    ms_analysis = metadata.get("MS_Analysis", {})
    rp = ms_analysis.get("Detector_Resolving_Power", {})
    rp200 = resolving_power_at_reference(
        analyzer=str(ms_analysis.get("Analyzer", "")),
        mz=float(rp["mz"]),
        resolving_power=float(rp["Resolving_Power"]),
    )
    return round(REFERENCE_MZ / rp200 / FWHM_TO_SIGMA, 6)


def add_processing_config(dataset: Dataset) -> None:
    """Sets `dataset.config` from its metadata, molecular databases and adducts.

    Expects metadata that already passed validation.
    """
    polarity = POLARITY_SIGNS[get_in(dataset.metadata, ("MS_Analysis", "Polarity"))]
    adducts = list(dataset.adducts) or list(DEFAULT_ADDUCTS[polarity])
    dataset.config = {
        "databases": list(dataset.mol_dbs),
        "isotope_generation": {
            "adducts": adducts,
            "charge": {"polarity": polarity, "n_charges": 1},
            "isocalc_sigma": isocalc_sigma(dataset.metadata),
            "isocalc_pts_per_mz": ISOCALC_PTS_PER_MZ,
        },
        "image_generation": dict(IMAGE_GENERATION_DEFAULTS),
    }
    log.debug(f"Derived processing config for {dataset!r}")
