"""
Model and observation file I/O.

Handles the .hmm and .obs text formats and JSON model documents.
"""

from .model_file import parse_model, format_model, load_model, save_model
from .model_json import MODEL_SCHEMA, parse_model_document, load_model_document, save_model_document
from .observations import parse_observations, format_observations, load_observations, save_observations

__all__ = [
    "parse_model",
    "format_model",
    "load_model",
    "save_model",
    "MODEL_SCHEMA",
    "parse_model_document",
    "load_model_document",
    "save_model_document",
    "parse_observations",
    "format_observations",
    "load_observations",
    "save_observations"
]
