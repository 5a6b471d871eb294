"""Cell classification and per-dialect rendering.

One function (`classify`) is shared by every output format.
"""
