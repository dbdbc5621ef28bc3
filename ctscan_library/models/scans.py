"""CT scan and tumor-detection result models."""

from enum import Enum

from pydantic import Field

from .base import CamelCaseModel

ScanId = int
PatientId = str


class TumorStage(str, Enum):
    """Tumor stage reported by the analysis service."""

    STAGE0 = "stage0"
    STAGE1 = "stage1"
    STAGE2 = "stage2"
    STAGE3 = "stage3"
    STAGE4 = "stage4"

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]


STAGE_LABELS: dict[TumorStage, str] = {
    TumorStage.STAGE0: "Stage 0 (In Situ)",
    TumorStage.STAGE1: "Stage I (Localized)",
    TumorStage.STAGE2: "Stage II (Regional)",
    TumorStage.STAGE3: "Stage III (Advanced)",
    TumorStage.STAGE4: "Stage IV (Metastatic)",
}


class TumorDetectionResult(CamelCaseModel):
    """Outcome of one analysis run. Attached to exactly one scan, never recomputed."""

    probability: float = Field(description="Tumor probability in [0, 1]")
    tumor_found: bool = Field(description="Whether the model detected a tumor")
    mask_image: bytes = Field(description="Segmentation mask (PNG)")
    stage: TumorStage = Field(description="Estimated tumor stage")
    confidence: float = Field(description="Model confidence in [0, 1]")

    def summary(self) -> str:
        """One-line human readable summary, percentages to one decimal.

        The stage is only reported when a tumor was found.
        """
        verdict = "Tumor detected" if self.tumor_found else "No tumor detected"
        parts = [
            verdict,
            f"probability {self.probability * 100:.1f}%",
            f"confidence {self.confidence * 100:.1f}%",
        ]
        if self.tumor_found:
            parts.append(self.stage.label)
        return " | ".join(parts)


class CTScan(CamelCaseModel):
    """Uploaded CT scan.

    Immutable once created apart from the single unanalyzed -> analyzed
    transition.
    """

    id: ScanId = Field(description="Backend-assigned scan identifier")
    patient_id: PatientId = Field(description="Patient identifier, e.g. 'PT-2025-001'")
    scan_image: bytes = Field(description="Uploaded image (JPEG/PNG)")
    analysis_result: TumorDetectionResult | None = Field(default=None, description="Set once analyzed")

    @property
    def is_analyzed(self) -> bool:
        return self.analysis_result is not None
