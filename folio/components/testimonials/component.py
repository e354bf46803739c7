"""
Testimonials component - newest-first testimonial list.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar

from folio.components.records import (
    AfterWrite,
    EntityManager,
    MutationOutput,
    RemoteGateway,
    SortOrder,
    WritePolicy,
)
from folio.core.entities import Testimonial, TestimonialDraft
from folio.core.ports.feedback import FeedbackPort

from .ports import TestimonialsRemotePort


class TestimonialsManager(EntityManager[Testimonial]):
    label: ClassVar[str] = "Testimonial"
    plural: ClassVar[str] = "testimonials"
    draft_model = TestimonialDraft
    order = SortOrder("created_at", descending=True)
    policy = WritePolicy(AfterWrite.APPEND_IN_PLACE, AfterWrite.REPLACE_IN_PLACE)

    def __init__(
        self,
        remote: TestimonialsRemotePort,
        feedback: FeedbackPort | None = None,
    ) -> None:
        super().__init__(
            RemoteGateway(
                remote.get_testimonials,
                remote.create_testimonial,
                remote.update_testimonial,
                remote.delete_testimonial,
            ),
            feedback,
        )

    async def toggle_featured(self, testimonial_id: str) -> MutationOutput[Testimonial]:
        current = self.get(testimonial_id)
        if current is None:
            return await self.update(testimonial_id, {"featured": True})
        return await self.update(testimonial_id, {"featured": not current.featured})


def featured_testimonials(items: Iterable[Testimonial]) -> list[Testimonial]:
    """Testimonials shown on the public page."""
    return [item for item in items if item.featured]


def average_rating(items: Iterable[Testimonial]) -> float | None:
    ratings = [item.rating for item in items]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 1)
