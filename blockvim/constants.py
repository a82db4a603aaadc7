"""Host selectors and engine-wide constants.

Selectors are opaque patterns handed to the content host capability.
The engine never interprets them; it only passes them back to the host.
"""

from __future__ import annotations

EXTENSION_ID = "blockvim"


class Selectors:
    """Declarative element patterns understood by the content host."""

    link = ".rm-page-ref"
    hidden_section = ".rm-block__part--equals"
    block = ".roam-block"
    block_input = ".rm-block-input"
    selectable_block = ".roam-block, .rm-block-input"
    block_container = ".roam-block-container"
    block_reference = ".rm-block-ref"
    main = ".roam-main"
    main_content = ".roam-article"
    main_body = ".roam-body-main"
    sidebar_content = ".sidebar-content"
    sidebar_page = ".sidebar-content > div"
    sidebar = "#right-sidebar"
    sidebar_scroll_container = "#roam-right-sidebar-content"
    fold_button = ".rm-caret"
    highlight = ".block-highlight-blue"
    button = ".bp3-button"
    close_button = ".bp3-icon-cross"
    view_more = ".roam-log-preview"
    checkbox = ".check-container"
    external_link = "a"
    page_reference_link = ".rm-ref-page-view-title a span"
    command_bar = ".bp3-omnibar"
    dialog_overlay = ".bp3-overlay"

    # Scrollable regions tagged as panels, main body first.
    panel_roots = (".roam-body-main > div:first-child", "#roam-right-sidebar-content")

    # Clickable targets inside one block, in hint order.
    block_clickables = (
        link,
        external_link,
        checkbox,
        button,
        block_reference,
        hidden_section,
    )

    # Clickable targets for page-wide hints.
    page_clickables = block_clickables + (fold_button, page_reference_link)


HINT_CHARS = "asdfghjkl"
DEFAULT_BLOCK_HINT_KEYS = ("q", "w", "e", "r", "t", "b")
SCROLL_PADDING = 50
SCROLL_STEP_PX = 50
MANY_BLOCKS_JUMP = 8
SEQUENCE_TIMEOUT_SECONDS = 0.5
WHICH_KEY_DELAY_SECONDS = 0.3
SETTLE_DELAY_SECONDS = 0.02
MAX_ANCESTOR_DEPTH = 64
BLOCK_UID_LENGTH = 9
LEADER_PATH_ROOT = "SPC"
