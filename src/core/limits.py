"""
Platform limits for rendered views.

Display text may be shortened to fit; identifiers never are (see
src.core.custom_id).
"""

CUSTOM_ID_MAX = 100
TITLE_MAX = 256
DESCRIPTION_MAX = 4096
FIELD_NAME_MAX = 256
FIELD_VALUE_MAX = 1024
FIELDS_PER_VIEW_MAX = 25
BUTTON_LABEL_MAX = 80
SELECT_OPTIONS_MAX = 25
SELECT_OPTION_TEXT_MAX = 100
SELECT_PLACEHOLDER_MAX = 150
CONTROLS_PER_ROW_MAX = 5
ROWS_PER_VIEW_MAX = 5
MODAL_TITLE_MAX = 45
MODAL_INPUTS_MAX = 5
TEXT_INPUT_LABEL_MAX = 45

ELLIPSIS = "..."


def truncate(text: str, limit: int) -> str:
    """Shorten text to at most `limit` characters, marking the cut with '...'."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS):
        return text[:limit]
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS
