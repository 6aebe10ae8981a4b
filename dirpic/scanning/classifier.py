from typing import Optional

from .. import config


def is_eligible(ext: Optional[str], cfg: Optional[config.OrganizerConfig] = None) -> bool:
    """
    True iff `ext` (case-insensitive, with or without the leading dot) is one
    of the recognized media types. Missing or unknown extensions are simply
    not eligible.
    """
    if not ext:
        return False
    extensions = cfg.extensions if cfg is not None else config.MEDIA_EXTS
    return config.normalize_ext(ext) in extensions
