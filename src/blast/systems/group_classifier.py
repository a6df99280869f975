from enum import Enum

from blast.constants import TIER_A_EXCLUSIVE_MIN, TIER_B_MIN_SIZE, TIER_C_MIN_SIZE


class GroupTier(Enum):
    DEFAULT = "default"
    A = "A"
    B = "B"
    C = "C"


def classify_group_size(size: int) -> GroupTier:
    if size >= TIER_C_MIN_SIZE:
        return GroupTier.C
    if size >= TIER_B_MIN_SIZE:
        return GroupTier.B
    if size > TIER_A_EXCLUSIVE_MIN:
        return GroupTier.A
    return GroupTier.DEFAULT
