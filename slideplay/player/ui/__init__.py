"""Host window chrome and frame navigation helpers."""

from .chrome import ChromeState, PlayerChrome
from .frame_navigation import frame_from_url_hash, frame_list_entries, frame_number_label, url_hash_for_frame


__all__ = [
    "ChromeState",
    "PlayerChrome",
    "frame_from_url_hash",
    "frame_list_entries",
    "frame_number_label",
    "url_hash_for_frame",
]
