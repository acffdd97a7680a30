from .extractor import (
    Extractor,
    classify_social_links,
    extract_by_label,
    render_info,
    resolve_logo_url,
    sanitize_folder_name,
)

__all__ = [
    "Extractor",
    "classify_social_links",
    "extract_by_label",
    "render_info",
    "resolve_logo_url",
    "sanitize_folder_name",
]
