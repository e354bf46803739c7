"""
Demo content for the in-memory backend.
"""

from __future__ import annotations

import logging

from folio.adapters.memory.backend import InMemoryBackend

logger = logging.getLogger(__name__)

DEMO_SETTINGS = {
    "hero_main_heading_suffix": "Jane",
    "hero_tagline": "Frontend Developer & UI/UX Designer",
    "contact_email": "jane@example.com",
}


async def seed_demo(backend: InMemoryBackend) -> None:
    """Populate every table with a small, consistent data set."""
    for key, value in DEMO_SETTINGS.items():
        await backend.upsert_site_setting(key, value)

    await backend.create_project(
        {
            "title": "Storefront Redesign",
            "description": "Headless commerce front end.",
            "category": "Frontend",
            "technologies": ["React", "TypeScript", "Tailwind"],
            "featured": True,
            "order_index": 0,
        }
    )
    poster = await backend.create_project(
        {
            "title": "Festival Posters",
            "description": "Print series for a summer festival.",
            "category": "Graphics",
            "technologies": ["Illustrator"],
            "order_index": 1,
        }
    )
    for index, url in enumerate(["memory://posters/1.png", "memory://posters/2.png"]):
        await backend.add_project_image(poster.id, url, index)

    await backend.create_testimonial(
        {
            "name": "Sam Lee",
            "position": "CTO",
            "company": "Acme",
            "content": "Delivered ahead of schedule.",
            "rating": 5,
            "featured": True,
        }
    )
    for index, (name, category, percentage) in enumerate(
        [("React", "Frontend", 90), ("TypeScript", "Frontend", 85), ("Figma", "Design", 80)]
    ):
        await backend.create_skill(
            {"name": name, "category": category, "percentage": percentage, "order_index": index}
        )

    await backend.create_contact(
        {
            "name": "Alex Doe",
            "email": "alex@example.com",
            "subject": "New website",
            "message": "Could you help with a landing page?",
            "status": "new",
        }
    )
    logger.info("Seeded demo backend")
