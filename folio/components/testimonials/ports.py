"""
Testimonials component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from folio.core.entities import Testimonial


class TestimonialsRemotePort(Protocol):
    async def get_testimonials(self) -> list[Testimonial]: ...
    async def create_testimonial(self, draft: Mapping[str, Any]) -> Testimonial: ...
    async def update_testimonial(
        self, testimonial_id: str, patch: Mapping[str, Any]
    ) -> Testimonial: ...
    async def delete_testimonial(self, testimonial_id: str) -> None: ...
