"""Initial priority of a request, derived from its category.

Runs once when the request is created. Later priority edits are manual
overrides and never call back into this module.
"""
from typing import Dict

from ..enum.maintenance_enum import CategoryType, PriorityLevel

PRIORITY_BY_CATEGORY: Dict[CategoryType, PriorityLevel] = {
    CategoryType.EMERGENCY: PriorityLevel.EMERGENCY,
    CategoryType.ELECTRICAL: PriorityLevel.URGENT,
    CategoryType.SAFETY_SECURITY: PriorityLevel.URGENT,
    CategoryType.PLUMBING: PriorityLevel.HIGH,
    CategoryType.HVAC: PriorityLevel.HIGH,
    CategoryType.APPLIANCE: PriorityLevel.MEDIUM,
    CategoryType.STRUCTURAL: PriorityLevel.LOW,
    CategoryType.PEST_CONTROL: PriorityLevel.LOW,
    CategoryType.CLEANING: PriorityLevel.LOW,
    CategoryType.GENERAL_MAINTENANCE: PriorityLevel.LOW,
}


def classify(category) -> PriorityLevel:
    """Map a category (enum member or its value) to its initial priority.

    Raises ValueError for values outside CategoryType.
    """
    return PRIORITY_BY_CATEGORY.get(CategoryType(category), PriorityLevel.LOW)
