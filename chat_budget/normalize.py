"""Full-width to half-width character normalization."""

import re


_FULL_WIDTH_PATTERN = re.compile(
    "[Ａ-Ｚａ-ｚ０-９（）［］｛｝＜＞＆＃＠＊＋－＝～！％＇＂，．／：；？＼＾＿｀｜￣“”‘’]"
)

_HALF_WIDTH_MAP = {
    # Letters and digits sit at a fixed offset from their ASCII forms
    **{chr(code): chr(code - 0xFEE0) for code in range(ord("Ａ"), ord("Ｚ") + 1)},
    **{chr(code): chr(code - 0xFEE0) for code in range(ord("ａ"), ord("ｚ") + 1)},
    **{chr(code): chr(code - 0xFEE0) for code in range(ord("０"), ord("９") + 1)},
    "（": "(", "）": ")", "［": "[", "］": "]", "｛": "{", "｝": "}",
    "＜": "<", "＞": ">", "＆": "&", "＃": "#", "＠": "@", "＊": "*",
    "＋": "+", "－": "-", "＝": "=", "～": "~", "！": "!", "％": "%",
    "＇": "'", "＂": '"', "，": ",", "．": ".", "／": "/", "：": ":",
    "；": ";", "？": "?", "＼": "\\", "＾": "^", "＿": "_", "｀": "`",
    "｜": "|", "￣": "~",
    # Curly quotes
    "“": '"', "”": '"', "‘": "'", "’": "'",
}


def to_half_width(text: str) -> str:
    """
    Replace full-width letters, digits and punctuation plus curly quotes
    with their ASCII equivalents.

    Every replacement is plain ASCII, so applying this twice is the same as
    applying it once.
    """
    if not text:
        return text
    return _FULL_WIDTH_PATTERN.sub(lambda m: _HALF_WIDTH_MAP.get(m.group(0), m.group(0)), text)


normalize = to_half_width
