from .categorize import batch_categorize, categorize_text, heuristic_category
from .cleanup import SmartPasteOptions, smart_paste, unwrap_model_output
from .formatter import FormatType, format_text
from .reply import generate_reply
from .search import cosine_similarity, keyword_search, semantic_search

__all__ = [
    "FormatType",
    "SmartPasteOptions",
    "batch_categorize",
    "categorize_text",
    "cosine_similarity",
    "format_text",
    "generate_reply",
    "heuristic_category",
    "keyword_search",
    "semantic_search",
    "smart_paste",
    "unwrap_model_output",
]
