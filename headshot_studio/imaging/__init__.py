from headshot_studio.imaging.optimize import MAX_DIMENSION, optimize_image
from headshot_studio.imaging.styling import OUTPUT_SIZE, finalize_image, resize_cover, transform

__all__ = [
    "MAX_DIMENSION",
    "OUTPUT_SIZE",
    "finalize_image",
    "optimize_image",
    "resize_cover",
    "transform",
]
