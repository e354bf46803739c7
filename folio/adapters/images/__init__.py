from folio.adapters.images.pillow_optimizer import PillowImageOptimizer, optimize_bytes

__all__ = ["PillowImageOptimizer", "optimize_bytes"]
