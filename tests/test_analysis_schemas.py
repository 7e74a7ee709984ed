"""
Result contract tests
"""

import pytest
from pydantic import ValidationError

from logoguard.schemas import RESULT_SCHEMA, AnalysisResult, Defect, Verdict


class TestResultSchemaDescription:
    def test_verdict_enum(self):
        assert RESULT_SCHEMA["properties"]["verdict"]["enum"] == ["PASS", "FAIL", "UNCERTAIN"]

    def test_defect_box_is_optional(self):
        item = RESULT_SCHEMA["properties"]["defects"]["items"]
        assert item["required"] == ["description"]
        assert item["properties"]["box_2d"]["items"]["type"] == "INTEGER"

    def test_top_level_required_fields(self):
        assert set(RESULT_SCHEMA["required"]) >= {"verdict", "confidence", "reasoning"}


class TestAnalysisResult:
    def test_valid_payload(self):
        result = AnalysisResult.model_validate(
            {"verdict": "PASS", "confidence": 97.5, "reasoning": "Intact.", "defects": []}
        )
        assert result.verdict is Verdict.PASS
        assert result.is_pass
        assert result.confidence_display == 98

    def test_unknown_verdict_is_uncertain(self):
        result = AnalysisResult.model_validate({"verdict": "MAYBE", "confidence": 50, "reasoning": "?"})
        assert result.verdict is Verdict.UNCERTAIN

    def test_verdict_is_case_sensitive(self):
        result = AnalysisResult.model_validate({"verdict": "pass", "confidence": 50, "reasoning": "?"})
        assert result.verdict is Verdict.UNCERTAIN

    def test_missing_defects_defaults_empty(self):
        result = AnalysisResult.model_validate({"verdict": "FAIL", "confidence": 60, "reasoning": "x"})
        assert result.defects == []

    def test_null_defects_defaults_empty(self):
        result = AnalysisResult.model_validate({"verdict": "FAIL", "confidence": 60, "reasoning": "x", "defects": None})
        assert result.defects == []

    def test_confidence_not_clamped(self):
        result = AnalysisResult.model_validate({"verdict": "FAIL", "confidence": 140, "reasoning": "x"})
        assert result.confidence == 140

    @pytest.mark.parametrize("confidence", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_confidence_rejected(self, confidence):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate({"verdict": "FAIL", "confidence": confidence, "reasoning": "x"})

    @pytest.mark.parametrize("missing", ["verdict", "confidence", "reasoning"])
    def test_required_fields(self, missing):
        payload = {"verdict": "FAIL", "confidence": 60, "reasoning": "x"}
        del payload[missing]
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(payload)

    def test_non_string_verdict_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate({"verdict": 1, "confidence": 60, "reasoning": "x"})

    def test_result_is_frozen(self):
        result = AnalysisResult.model_validate({"verdict": "PASS", "confidence": 99, "reasoning": "ok"})
        with pytest.raises(ValidationError):
            result.verdict = Verdict.FAIL


class TestDefect:
    def test_box_kept(self):
        assert Defect(description="chip", box_2d=[1, 2, 3, 4]).box_2d == [1, 2, 3, 4]

    def test_float_box_rounded(self):
        assert Defect(description="chip", box_2d=[1.4, 2.6, 3.0, 4.0]).box_2d == [1, 3, 3, 4]

    def test_box_absent(self):
        assert Defect(description="chip").box_2d is None

    @pytest.mark.parametrize(
        "box", ["10,20,30,40", [10, "a", 30, 40], {"top": 1}, [True, 1, 2, 3], 7, [10**400, 0, 0, 0]]
    )
    def test_malformed_box_dropped(self, box):
        defect = Defect.model_validate({"description": "chip", "box_2d": box})
        assert defect.description == "chip"
        assert defect.box_2d is None

    def test_wrong_length_box_kept_for_mapper(self):
        assert Defect(description="chip", box_2d=[1, 2, 3]).box_2d == [1, 2, 3]

    def test_description_required(self):
        with pytest.raises(ValidationError):
            Defect.model_validate({"box_2d": [1, 2, 3, 4]})

    def test_malformed_box_does_not_invalidate_result(self):
        result = AnalysisResult.model_validate(
            {
                "verdict": "FAIL",
                "confidence": 80,
                "reasoning": "x",
                "defects": [{"description": "a", "box_2d": "bad"}, {"description": "b", "box_2d": [0, 0, 10, 10]}],
            }
        )
        assert [d.box_2d for d in result.defects] == [None, [0, 0, 10, 10]]
