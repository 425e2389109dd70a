from career_diagnosis.utils.json_text import (
    decode_json_string,
    sanitize_json_text,
    strip_lone_surrogates,
    unwrap_markdown_json,
)
from career_diagnosis.utils.normalize import coerce_to_object, normalize_string_list, normalize_to_string, repair_llm_json

__all__ = [
    "coerce_to_object",
    "decode_json_string",
    "normalize_string_list",
    "normalize_to_string",
    "repair_llm_json",
    "sanitize_json_text",
    "strip_lone_surrogates",
    "unwrap_markdown_json",
]
