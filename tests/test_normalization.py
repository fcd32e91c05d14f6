from uuid import UUID

from certificates_api.utils.normalization import (
    DEFAULT_STUDENT_CATEGORY,
    build_certificate_record,
    missing_required_fields,
    normalize_grades,
    to_number,
    to_text,
)


class TestFieldCoercion:
    """Text and number coercion helpers"""

    def test_to_text_trims_strings(self):
        assert to_text("  Ali  ") == "Ali"

    def test_to_text_falls_back_for_non_strings(self):
        assert to_text(None) == ""
        assert to_text(42) == ""
        assert to_text(["a"], "fallback") == "fallback"

    def test_to_number(self):
        assert to_number("90") == 90
        assert to_number(" 12.5 ") == 12.5
        assert to_number(7) == 7
        assert to_number(None) == 0
        assert to_number("abc") == 0
        assert to_number(True) == 0
        assert to_number(float("nan")) == 0
        assert to_number(None, None) is None

    def test_integral_values_become_int(self):
        assert isinstance(to_number("90"), int)
        assert isinstance(to_number(3.0), int)


class TestGrades:
    def test_grades_are_coerced(self):
        grades = [{"subject": "Math", "first": "90", "second": None}]
        assert normalize_grades(grades) == [{"subject": "Math", "first": 90, "second": 0}]

    def test_non_list_grades_become_empty(self):
        assert normalize_grades(None) == []
        assert normalize_grades({"subject": "Math"}) == []
        assert normalize_grades("Math") == []

    def test_order_is_preserved_and_bad_entries_defaulted(self):
        grades = [
            {"subject": " Science ", "first": 70, "second": "80"},
            None,
            {"subject": 5, "first": "x"},
        ]
        assert normalize_grades(grades) == [
            {"subject": "Science", "first": 70, "second": 80},
            {"subject": "", "first": 0, "second": 0},
            {"subject": "", "first": 0, "second": 0},
        ]


class TestBuildCertificateRecord:
    def test_minimal_payload_gets_defaults(self):
        record = build_certificate_record({"registrationNumber": "R100", "studentName": "Ali"})

        assert record["registrationNumber"] == "R100"
        assert record["studentName"] == "Ali"
        assert record["studentCategory"] == DEFAULT_STUDENT_CATEGORY
        assert record["studentCenter"] == ""
        assert record["sigName"] == ""
        assert record["lang"] == "ar"
        assert record["attendance"] == 0
        assert record["absence"] == 0
        assert record["average"] is None
        assert record["grades"] == []
        assert record["certification"] == {}
        assert record["image"] is None
        # Generated ids are UUIDs
        UUID(record["id"])

    def test_caller_id_is_kept(self):
        record = build_certificate_record({"id": " cert-1 ", "registrationNumber": "R1", "studentName": "A"})
        assert record["id"] == "cert-1"

        record = build_certificate_record({"id": 1700000000000, "registrationNumber": "R1", "studentName": "A"})
        assert record["id"] == "1700000000000"

    def test_generated_ids_differ(self):
        payload = {"registrationNumber": "R1", "studentName": "A"}
        assert build_certificate_record(payload)["id"] != build_certificate_record(payload)["id"]

    def test_top_level_wins_over_nested(self):
        record = build_certificate_record({
            "registrationNumber": "R1",
            "studentName": "A",
            "studentCategory": "Adults",
            "studentCenter": "",
            "certification": {"studentCategory": "Kids", "studentCenter": "North"},
        })
        assert record["studentCategory"] == "Adults"
        # Blank top-level text falls through to the nested value
        assert record["studentCenter"] == "North"

    def test_nested_shape_is_flattened_and_preserved(self):
        certification = {
            "studentCategory": "Kids",
            "sigName": "Director",
            "lang": "en",
            "attendance": "20",
            "absence": 2,
            "average": "88.5",
            "grades": [{"subject": "Math", "first": "90", "second": None}],
            "certificationNumber": "C-9",
            "hours": "30",
            "extra": {"anything": [1, 2]},
        }
        record = build_certificate_record({
            "registrationNumber": "R1",
            "studentName": "A",
            "certification": certification,
        })

        assert record["studentCategory"] == "Kids"
        assert record["sigName"] == "Director"
        assert record["lang"] == "en"
        assert record["attendance"] == 20
        assert record["absence"] == 2
        assert record["average"] == 88.5
        assert record["grades"] == [{"subject": "Math", "first": 90, "second": 0}]
        assert record["certificationNumber"] == "C-9"
        assert record["hours"] == "30"
        assert "completionDate" not in record
        assert record["certification"] == certification

    def test_non_mapping_certification_becomes_empty(self):
        record = build_certificate_record({
            "registrationNumber": "R1",
            "studentName": "A",
            "certification": "not a mapping",
        })
        assert record["certification"] == {}

    def test_image_is_kept_verbatim_or_null(self):
        payload = {"registrationNumber": "R1", "studentName": "A", "image": "data:image/png;base64,AAAA"}
        assert build_certificate_record(payload)["image"] == "data:image/png;base64,AAAA"

        payload["image"] = "   "
        assert build_certificate_record(payload)["image"] is None

    def test_missing_required_fields(self):
        assert missing_required_fields({"registrationNumber": "R1", "studentName": "A"}) == []
        assert missing_required_fields({"studentName": "A"}) == ["registrationNumber"]
        assert missing_required_fields({"registrationNumber": " ", "studentName": None}) == [
            "registrationNumber",
            "studentName",
        ]
