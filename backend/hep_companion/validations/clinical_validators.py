"""
clinical_validators.py
- Purpose: Decide whether a free-text prompt carries enough clinical detail
  to be worth sending to the model.
- Design: Pure functions; the request schema turns a failed result into a 400.
"""

from dataclasses import dataclass

CLINICAL_KEYWORDS: tuple[str, ...] = (
    # Conditions and anatomical terms
    "ACL", "LBP", "knee", "shoulder", "hip", "ankle", "spine", "neck", "back", "elbow", "wrist",
    "cervical", "thoracic", "lumbar", "sacral", "TMJ", "patellofemoral", "meniscus", "rotator cuff",
    "tendinopathy", "tendinitis", "bursitis", "arthritis", "osteoarthritis", "scoliosis",
    "sciatica", "radicular", "radiculopathy", "neuropathy", "impingement",

    # Clinical terms
    "post-op", "post-surgical", "rehabilitation", "prehabilitation", "ROM", "WBAT", "TTWB", "NWB",
    "FWB", "PWB", "quad", "hamstring", "pain", "injury", "surgery", "physical therapy", "PT",
    "strength", "flexibility", "mobility", "stability", "balance", "coordination", "gait",
    "proprioception", "kinesthesia", "AROM", "PROM", "AAROM", "ATNR", "MMT",

    # Therapeutic approaches
    "strengthening", "stretching", "mobilization", "manipulation", "neuromuscular",
    "plyometric", "isometric", "isotonic", "isokinetic", "eccentric", "concentric",
    "closed-chain", "open-chain", "therapeutic exercise", "manual therapy",

    # Assessment terms
    "evaluation", "assessment", "testing", "functional", "musculoskeletal", "neurological",
    "orthopedic", "sports", "geriatric", "pediatric", "vestibular", "proprioceptive",
)

MIN_KEYWORDS = 2
MIN_WORDS = 8

KEYWORDS_ERROR = "Please include specific clinical terms and patient details"
WORDS_ERROR = "Please describe the clinical scenario in more detail (at least 8 words)"


@dataclass(frozen=True)
class ClinicalInputResult:
    is_valid: bool
    error: str | None = None
    details: str | None = None


def count_clinical_keywords(text: str) -> int:
    lowered = (text or "").lower()
    return sum(1 for kw in CLINICAL_KEYWORDS if kw.lower() in lowered)


def validate_clinical_input(text: str) -> ClinicalInputResult:
    if count_clinical_keywords(text) < MIN_KEYWORDS:
        return ClinicalInputResult(
            is_valid=False,
            error=KEYWORDS_ERROR,
            details="Try including specific information about the condition, body part, or treatment goals.",
        )

    if len((text or "").split()) < MIN_WORDS:
        return ClinicalInputResult(
            is_valid=False,
            error=WORDS_ERROR,
            details="Please provide more context about the patient's condition and needs.",
        )

    return ClinicalInputResult(is_valid=True)
