"""Tests for remote data models."""

import pytest

from ctscan_library.models import STAGE_LABELS
from ctscan_library.models import CTScan
from ctscan_library.models import ExternalApiConfig
from ctscan_library.models import TumorDetectionResult
from ctscan_library.models import TumorStage
from ctscan_library.models import is_api_configured


@pytest.mark.unit
class TestScanModels:
    """Test scan and result models."""

    def test_camel_case_serialization(self) -> None:
        scan = CTScan(id=3, patient_id="PT-3", scan_image=b"abc")

        data = scan.model_dump(by_alias=True)

        assert data["patientId"] == "PT-3"
        assert data["scanImage"] == b"abc"
        assert data["analysisResult"] is None
        assert scan.is_analyzed is False

    def test_populate_by_field_name_or_alias(self) -> None:
        by_alias = CTScan.model_validate({"id": 1, "patientId": "PT-1", "scanImage": b"x"})
        by_name = CTScan(id=1, patient_id="PT-1", scan_image=b"x")

        assert by_alias == by_name

    def test_json_bytes_base64(self) -> None:
        scan = CTScan(id=1, patient_id="PT-1", scan_image=b"\x89PNG")

        restored = CTScan.model_validate_json(scan.model_dump_json(by_alias=True))

        assert restored.scan_image == b"\x89PNG"

    def test_every_stage_has_label(self) -> None:
        assert set(STAGE_LABELS) == set(TumorStage)
        assert TumorStage.STAGE4.label == "Stage IV (Metastatic)"

    def test_result_summary(self) -> None:
        result = TumorDetectionResult(
            probability=0.8734,
            tumor_found=True,
            mask_image=b"",
            stage=TumorStage.STAGE1,
            confidence=0.9,
        )

        assert result.summary() == (
            "Tumor detected | probability 87.3% | confidence 90.0% | Stage I (Localized)"
        )

    def test_summary_omits_stage_without_tumor(self) -> None:
        result = TumorDetectionResult(
            probability=0.042,
            tumor_found=False,
            mask_image=b"",
            stage=TumorStage.STAGE0,
            confidence=0.95,
        )

        assert result.summary() == "No tumor detected | probability 4.2% | confidence 95.0%"

    def test_invalid_stage_rejected(self) -> None:
        with pytest.raises(ValueError):
            TumorDetectionResult(probability=0.1, tumor_found=False, mask_image=b"", stage="stage9", confidence=0.1)


@pytest.mark.unit
class TestApiConfig:
    """Test the client-side Analyze gate."""

    @pytest.mark.parametrize(
        ("config", "expected"),
        [
            (None, False),
            (ExternalApiConfig(endpoint_url="", api_key=""), False),
            (ExternalApiConfig(endpoint_url="https://ai.test", api_key=""), False),
            (ExternalApiConfig(endpoint_url="   ", api_key="k"), False),
            (ExternalApiConfig(endpoint_url="https://ai.test", api_key="k"), True),
        ],
    )
    def test_is_api_configured(self, config: ExternalApiConfig | None, expected: bool) -> None:
        assert is_api_configured(config) is expected
