from __future__ import annotations

__all__ = ["IDs", "PRESET_BUTTONS"]


class IDs:
    class Store:
        SESSION_ID = "session-id"
        EVENT_ACK = "event-ack"
        VIEWPORT = "viewport"
        PREFERENCES = "user-preferences"

    class Control:
        # Organization search
        ORG_FILTER = "org-filter"
        MATCHING_ORGS = "matching-orgs"

        # Minimum amount: slider, numeric mirror and formatted label
        MIN_AMOUNT = "min-amount"
        MIN_AMOUNT_INPUT = "min-amount-input"
        MIN_AMOUNT_DISPLAY = "min-amount-display"

        MAX_ORGS = "max-orgs"
        DEPTH = "depth"
        COLOR_SCHEME = "color-scheme"
        YEAR_FILTER = "year-filter"
        YEAR_FILTER_CONTAINER = "year-filter-container"

        # Buttons
        THEME_TOGGLE = "theme-toggle"
        ZOOM_TO_FIT = "zoom-to-fit"
        EXPORT = "export"
        FORM = "controls-form"

        PRESET_SMALL = "preset-small"
        PRESET_LARGE = "preset-large"
        PRESET_RECENT = "preset-recent"
        PRESET_NETWORK = "preset-network"

    class Display:
        MAIN_GRAPH = "main-graph"
        STATS = "stats"
        LOADING_OVERLAY = "loading-overlay"
        LOADING_TEXT = "loading-text"
        WARNING_BANNER = "grant-warning"
        ERROR_BANNER = "error-banner"
        DOWNLOAD = "export-download"
        POLL = "display-poll"
        ROOT = "app-root"


# button id -> preset name
PRESET_BUTTONS = {
    IDs.Control.PRESET_SMALL: "small",
    IDs.Control.PRESET_LARGE: "large",
    IDs.Control.PRESET_RECENT: "recent",
    IDs.Control.PRESET_NETWORK: "network",
}
