"""
Exam Catalogue

Dispatch table from requested scintigraphy exam to the consultation
sub-payload it fills and to the fields an injection submission is read from.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NOT_AVAILABLE = "N/A"


class ScintigraphyExam(str, Enum):
    """Exams the department performs."""
    BONE = "Scintigraphie Osseuse"
    PARATHYROID = "Scintigraphie Parathyroïdienne"
    RENAL_DMSA = "Scintigraphie Rénale DMSA"
    RENAL_DTPA_MAG3 = "Scintigraphie Rénale DTPA/MAG3"
    THYROID = "Scintigraphie Thyroïdienne"


@dataclass(frozen=True)
class InjectionFieldMap:
    """
    Where each normalized injection field is read from.

    Each tuple lists candidate keys of the submitted form; the first non-empty
    value wins.
    """
    product: tuple[str, ...] = ()
    dose: tuple[str, ...] = ()
    time: tuple[str, ...] = ()
    route: tuple[str, ...] = ()
    default_product: str = NOT_AVAILABLE


@dataclass(frozen=True)
class ExamProfile:
    """Consultation sub-key and injection mapping for one exam."""
    exam: ScintigraphyExam
    consultation_key: str
    injection_fields: InjectionFieldMap = field(default_factory=InjectionFieldMap)


# Used when the requested exam is missing or not in the catalogue.
GENERIC_INJECTION_FIELDS = InjectionFieldMap(
    product=("coldMolecule", "mibiInjectedActivity", "injectedActivity"),
    dose=("injectedActivity", "mibiInjectedActivity"),
    time=("injectionTime", "injectionTimeMIBI"),
    route=("injectionPoint", "injectionSite"),
)


EXAM_PROFILES: dict[ScintigraphyExam, ExamProfile] = {
    ScintigraphyExam.BONE: ExamProfile(
        exam=ScintigraphyExam.BONE,
        consultation_key="boneData",
        injection_fields=InjectionFieldMap(
            product=("coldMolecule",),
            dose=("injectedActivity",),
            time=("injectionTime",),
            route=("injectionPoint",),
        ),
    ),
    ScintigraphyExam.PARATHYROID: ExamProfile(
        exam=ScintigraphyExam.PARATHYROID,
        consultation_key="parathyroidData",
        injection_fields=InjectionFieldMap(
            product=("coldMolecule",),
            dose=("mibiInjectedActivity", "technetiumFreeActivity"),
            time=("injectionTimeMIBI", "injectionTime99mTc"),
            route=("injectionPoint",),
            default_product="MIBI",
        ),
    ),
    ScintigraphyExam.RENAL_DMSA: ExamProfile(
        exam=ScintigraphyExam.RENAL_DMSA,
        consultation_key="renalDMSAData",
        injection_fields=InjectionFieldMap(
            product=("coldMolecule",),
            dose=("injectedActivity",),
            time=("injectionTime",),
        ),
    ),
    ScintigraphyExam.RENAL_DTPA_MAG3: ExamProfile(
        exam=ScintigraphyExam.RENAL_DTPA_MAG3,
        consultation_key="renalDTPAMAG3Data",
        injection_fields=InjectionFieldMap(
            product=("coldMolecule",),
            dose=("injectedActivity",),
            time=("injectionTime",),
            route=("injectionPoint",),
        ),
    ),
    ScintigraphyExam.THYROID: ExamProfile(
        exam=ScintigraphyExam.THYROID,
        consultation_key="thyroidData",
        injection_fields=InjectionFieldMap(
            product=("coldMolecule",),
            dose=("injectedActivity",),
            time=("injectionTime",),
            route=("injectionSite",),
        ),
    ),
}


def get_exam_profile(requested_exam: str | None) -> ExamProfile | None:
    """Look up the profile for a requested exam string; None if unknown."""
    if not requested_exam:
        return None
    try:
        return EXAM_PROFILES[ScintigraphyExam(requested_exam)]
    except ValueError:
        return None


def _first_value(form_data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = form_data.get(key)
        if value not in (None, ""):
            return value
    return None


def normalize_injection(
    form_data: dict[str, Any],
    profile: ExamProfile | None = None,
    fill_missing: bool = True,
) -> dict[str, Any]:
    """
    Project an exam-specific injection form onto the injection room payload.

    Args:
        form_data: Submitted injection form
        profile: Exam whose field names the form uses; generic names if None
        fill_missing: Use the default product and "N/A" for fields the form
            leaves empty; otherwise leave those keys out

    Returns:
        Dict with produitInjecte, dose, heureInjection, voieAdministration
    """
    fields = profile.injection_fields if profile else GENERIC_INJECTION_FIELDS
    values = {
        "produitInjecte": _first_value(form_data, fields.product),
        "dose": _first_value(form_data, fields.dose),
        "heureInjection": _first_value(form_data, fields.time),
        "voieAdministration": _first_value(form_data, fields.route),
    }
    if not fill_missing:
        return {key: value for key, value in values.items() if value is not None}

    defaults = {"produitInjecte": fields.default_product}
    return {
        key: value if value is not None else defaults.get(key, NOT_AVAILABLE)
        for key, value in values.items()
    }
