"""folio - portfolio site content stores and admin console core."""

__version__ = "0.4.0"
