"""Appraisal templates.

Two shapes exist in storage: the current one groups items under
``categories``; older templates carry a flat ``questions`` list. Both are read
through ``normalize_template`` so that the rest of the code only ever sees the
categorized form.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Tag, TypeAdapter

from appraisal_portal.models.employee import PortalModel

AppraisalType = Literal[
    "executives-to-leaders",
    "leaders-to-members",
    "members-to-leaders",
    "leaders-to-leaders",
    "members-to-members",
]
QuestionType = Literal["rating-1-5", "rating-1-10", "text", "multiple-choice"]

DEFAULT_CATEGORY_NAME = "General"


class CategoryItem(PortalModel):
    id: str
    category_name: str | None = None
    text: str
    type: QuestionType = "rating-1-5"
    weight: float = 0
    required: bool = False
    options: list[str] | None = None
    order: int = 0


class Category(PortalModel):
    id: str
    category_name: str
    items: list[CategoryItem] = []
    order: int = 0


class LegacyQuestion(PortalModel):
    id: str
    evaluation_factor: float | None = None
    category_name: str | None = None
    text: str
    type: QuestionType = "rating-1-5"
    weight: float = 0
    required: bool = False
    options: list[str] | None = None
    order: int = 0


class Template(PortalModel):
    id: str
    name: str
    subtitle: str | None = None
    type: AppraisalType
    categories: list[Category] = []
    created_at: str | None = None
    updated_at: str | None = None
    version: int = 1


class LegacyTemplate(PortalModel):
    id: str
    name: str
    subtitle: str | None = None
    type: AppraisalType
    questions: list[LegacyQuestion]
    created_at: str | None = None
    updated_at: str | None = None
    version: int = 1

    def to_categorized(self) -> Template:
        grouped: dict[str, list[LegacyQuestion]] = {}
        for question in sorted(self.questions, key=lambda q: q.order):
            grouped.setdefault(question.category_name or DEFAULT_CATEGORY_NAME, []).append(question)

        categories = [
            Category(
                id=f"{self.id}-cat-{index}",
                category_name=name,
                order=index,
                items=[
                    CategoryItem(
                        id=q.id,
                        text=q.text,
                        type=q.type,
                        weight=q.weight,
                        required=q.required,
                        options=q.options,
                        order=q.order,
                    )
                    for q in questions
                ],
            )
            for index, (name, questions) in enumerate(grouped.items())
        ]
        return Template(
            id=self.id,
            name=self.name,
            subtitle=self.subtitle,
            type=self.type,
            categories=categories,
            created_at=self.created_at,
            updated_at=self.updated_at,
            version=self.version,
        )


def _schema_tag(value: Any) -> str:
    if isinstance(value, dict):
        if value.get("categories"):
            return "categories"
        return "questions" if value.get("questions") else "categories"
    return "questions" if isinstance(value, LegacyTemplate) else "categories"


StoredTemplate = Annotated[
    Union[Annotated[Template, Tag("categories")], Annotated[LegacyTemplate, Tag("questions")]],
    Discriminator(_schema_tag),
]

_stored_template = TypeAdapter(StoredTemplate)


def normalize_template(raw: dict[str, Any] | Template | LegacyTemplate) -> Template:
    stored = _stored_template.validate_python(raw)
    if isinstance(stored, LegacyTemplate):
        return stored.to_categorized()
    return stored
