from .svg import path_to_svg_d, export_svg, save_svg

__all__ = ["path_to_svg_d", "export_svg", "save_svg"]
