from .compositor import composite_layers
from .gradient import gradient_colors, interpolate_color

__all__ = ["composite_layers", "gradient_colors", "interpolate_color"]
