"""Visual theme for the browser screen.

All colors use Rich style syntax (e.g. "white", "on blue", "dim").
"""

from dataclasses import dataclass


@dataclass
class Theme:
    """Colors, icons and layout for the three screen regions.

    Attributes:
        text_color: Style for the search text and list rows.
        highlight_style: Style applied to the selected row.
        status_color: Style for the footer status message.
        border_color: Panel border style.
        search_border_color: Header border style while search mode is active.
        dim_color: Style for placeholders and scroll hints.

        cursor_icon: Marker drawn before the selected row.
        scroll_up_icon: Shown when rows are hidden above the window.
        scroll_down_icon: Shown when rows are hidden below the window.

        header_height: Lines taken by the search panel.
        footer_height: Lines taken by the status panel.
        min_visible_items: Rows always shown, even on tiny terminals.
    """

    # Colors
    text_color: str = "white"
    highlight_style: str = "on blue"
    status_color: str = "grey70"
    border_color: str = "cyan"
    search_border_color: str = "yellow"
    dim_color: str = "dim"

    # Icons
    cursor_icon: str = ">> "
    scroll_up_icon: str = "↑"
    scroll_down_icon: str = "↓"

    # Layout
    header_height: int = 3
    footer_height: int = 3
    min_visible_items: int = 3


DEFAULT_THEME = Theme()
