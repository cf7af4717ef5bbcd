from __future__ import annotations

import pytest
from pydantic import ValidationError

from appraisal_portal.models.template import DEFAULT_CATEGORY_NAME, Template, normalize_template

CATEGORIZED = {
    "id": "tpl-1",
    "name": "Leader review",
    "type": "leaders-to-members",
    "version": 3,
    "categories": [
        {
            "id": "cat-1",
            "categoryName": "Delivery",
            "order": 0,
            "items": [
                {"id": "q1", "text": "Meets deadlines", "type": "rating-1-5", "weight": 5, "required": True, "order": 0},
            ],
        }
    ],
}

LEGACY = {
    "id": "tpl-old",
    "name": "Old review",
    "type": "members-to-leaders",
    "createdAt": "2024-01-01T00:00:00Z",
    "questions": [
        {"id": "q2", "categoryName": "Support", "text": "Helps the team", "weight": 3, "order": 1},
        {"id": "q1", "categoryName": "Support", "text": "Is available", "weight": 2, "order": 0},
        {"id": "q3", "text": "Anything else?", "type": "text", "weight": 1, "order": 2},
    ],
}


def test_categorized_template_passes_through():
    template = normalize_template(CATEGORIZED)
    assert isinstance(template, Template)
    assert template.version == 3
    assert template.categories[0].category_name == "Delivery"
    assert template.categories[0].items[0].required is True


def test_legacy_questions_are_grouped_into_categories():
    template = normalize_template(LEGACY)

    assert isinstance(template, Template)
    assert template.created_at == "2024-01-01T00:00:00Z"
    assert [c.category_name for c in template.categories] == ["Support", DEFAULT_CATEGORY_NAME]
    support = template.categories[0]
    assert [i.id for i in support.items] == ["q1", "q2"]
    assert support.items[1].weight == 3
    assert template.categories[1].items[0].type == "text"


def test_template_without_questions_or_categories_is_categorized():
    template = normalize_template({"id": "t", "name": "Empty", "type": "leaders-to-leaders"})
    assert template.categories == []


def test_already_normalized_template_is_returned():
    template = normalize_template(CATEGORIZED)
    assert normalize_template(template) is template


def test_unknown_template_type_is_rejected():
    with pytest.raises(ValidationError):
        normalize_template({**CATEGORIZED, "type": "everyone-to-everyone"})
