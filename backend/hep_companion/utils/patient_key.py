"""
patient_key.py
- Purpose: Deterministic pseudonym for a patient (MRN + clinic), so prompts
  can be linked across notes without storing the MRN itself.
"""

import hashlib
import hmac


def generate_patient_key(mrn: str, clinic_id: str) -> str:
    """SHA-256 hex digest of the MRN concatenated with the clinic id."""
    if not mrn or not clinic_id:
        raise ValueError("Both MRN and clinic ID are required to generate a patient key")

    return hashlib.sha256(f"{mrn}{clinic_id}".encode("utf-8")).hexdigest()


def verify_patient_key(patient_key: str, mrn: str, clinic_id: str) -> bool:
    if not patient_key or not mrn or not clinic_id:
        return False

    expected = generate_patient_key(mrn, clinic_id)
    return hmac.compare_digest(patient_key.encode("utf-8"), expected.encode("utf-8"))
