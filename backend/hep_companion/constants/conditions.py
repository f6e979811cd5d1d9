"""
conditions.py
- Purpose: Conditions the exercise library is curated for.
- Design: Keep values stable; they are stored in the exercises table.
"""

from enum import Enum


class ExerciseCondition(str, Enum):
    LBP = "LBP"
    ACL = "ACL"
    PFP = "PFP"


CONDITION_LABELS: dict[ExerciseCondition, str] = {
    ExerciseCondition.LBP: "Low Back Pain",
    ExerciseCondition.ACL: "ACL Rehabilitation",
    ExerciseCondition.PFP: "Patellofemoral Pain",
}
