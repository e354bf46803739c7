"""
Testimonials component - testimonial manager and public helpers.
"""

from .component import TestimonialsManager, average_rating, featured_testimonials
from .ports import TestimonialsRemotePort

__all__ = [
    "TestimonialsManager",
    "TestimonialsRemotePort",
    "featured_testimonials",
    "average_rating",
]
