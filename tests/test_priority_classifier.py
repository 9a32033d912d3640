import pytest

from maintenance_service.app.enum.maintenance_enum import CategoryType, PriorityLevel
from maintenance_service.app.lifecycle.priority_classifier import PRIORITY_BY_CATEGORY, classify


@pytest.mark.parametrize(
    "category, expected",
    [
        (CategoryType.EMERGENCY, PriorityLevel.EMERGENCY),
        (CategoryType.ELECTRICAL, PriorityLevel.URGENT),
        (CategoryType.SAFETY_SECURITY, PriorityLevel.URGENT),
        (CategoryType.PLUMBING, PriorityLevel.HIGH),
        (CategoryType.HVAC, PriorityLevel.HIGH),
        (CategoryType.APPLIANCE, PriorityLevel.MEDIUM),
        (CategoryType.STRUCTURAL, PriorityLevel.LOW),
        (CategoryType.PEST_CONTROL, PriorityLevel.LOW),
        (CategoryType.CLEANING, PriorityLevel.LOW),
        (CategoryType.GENERAL_MAINTENANCE, PriorityLevel.LOW),
    ],
)
def test_classify_maps_each_category(category, expected):
    assert classify(category) == expected


def test_every_category_has_exactly_one_priority():
    assert set(PRIORITY_BY_CATEGORY) == set(CategoryType)
    for category in CategoryType:
        assert classify(category) == classify(category)


def test_classify_accepts_raw_values():
    assert classify("emergency") == PriorityLevel.EMERGENCY


def test_classify_rejects_unknown_category():
    with pytest.raises(ValueError):
        classify("gardening")


def test_priority_levels_are_ordered():
    levels = [p.level for p in PriorityLevel]
    assert levels == [1, 2, 3, 4, 5]
    assert PriorityLevel.EMERGENCY.level > PriorityLevel.URGENT.level > PriorityLevel.LOW.level
