from datetime import date

from scintiflow.models.core import calculate_age
from scintiflow.models.exams import (
    EXAM_PROFILES,
    ScintigraphyExam,
    get_exam_profile,
    normalize_injection,
)


def test_calculate_age():
    dob = date(1965, 3, 15)

    assert calculate_age(dob, date(2024, 3, 14)) == 58
    assert calculate_age(dob, date(2024, 3, 15)) == 59


def test_exam_profiles_cover_catalogue():
    assert set(EXAM_PROFILES) == set(ScintigraphyExam)
    assert get_exam_profile("Scintigraphie Osseuse").consultation_key == "boneData"
    assert get_exam_profile("Scintigraphie Rénale DTPA/MAG3").consultation_key == "renalDTPAMAG3Data"
    assert get_exam_profile("TEP-TDM") is None
    assert get_exam_profile(None) is None


def test_normalize_injection_thyroid_route():
    profile = get_exam_profile("Scintigraphie Thyroïdienne")

    payload = normalize_injection(
        {"coldMolecule": "Pertechnétate", "injectedActivity": "185 MBq", "injectionSite": "Bras droit"},
        profile,
    )

    assert payload == {
        "produitInjecte": "Pertechnétate",
        "dose": "185 MBq",
        "heureInjection": "N/A",
        "voieAdministration": "Bras droit",
    }


def test_normalize_injection_falls_back_to_second_key():
    profile = get_exam_profile("Scintigraphie Parathyroïdienne")

    payload = normalize_injection(
        {"mibiInjectedActivity": "", "technetiumFreeActivity": "200 MBq", "injectionTime99mTc": "11:00"},
        profile,
    )

    assert payload["dose"] == "200 MBq"
    assert payload["heureInjection"] == "11:00"
    assert payload["produitInjecte"] == "MIBI"


def test_normalize_injection_generic():
    payload = normalize_injection({"injectedActivity": "100 MBq", "injectionPoint": "Pli du coude"})

    assert payload["dose"] == "100 MBq"
    assert payload["voieAdministration"] == "Pli du coude"


def test_normalize_injection_without_placeholders():
    profile = get_exam_profile("Scintigraphie Parathyroïdienne")

    assert normalize_injection({"mibiInjectedActivity": "600 MBq"}, profile, fill_missing=False) == {"dose": "600 MBq"}
    assert normalize_injection({}, profile, fill_missing=False) == {}
