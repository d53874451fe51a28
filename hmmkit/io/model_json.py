"""
JSON model documents.

This module loads and validates JSON model documents against a schema
before building the model, and writes models back in the same layout.
"""

import json
import jsonschema
from pathlib import Path
from typing import Any, Dict, Union

from ..config import get_config
from ..exceptions import ModelDefinitionError, ModelFormatError
from ..hmm.model import HiddenMarkovModel
from ..logger import get_logger

logger = get_logger(__name__)


_PROBABILITY = {"type": "number", "minimum": 0.0}
_NAMES = {
    "type": "array",
    "items": {"type": "string", "pattern": "^\\S+$"},
    "minItems": 1,
    "uniqueItems": True
}
_MATRIX = {
    "type": "array",
    "items": {"type": "array", "items": _PROBABILITY},
    "minItems": 1
}

# JSON schema for model documents
MODEL_SCHEMA = {
    "type": "object",
    "properties": {
        "states": dict(_NAMES, description="State identifiers in index order"),
        "symbols": dict(_NAMES, description="Output symbol identifiers in index order"),
        "transition": dict(_MATRIX, description="N x N transition probabilities"),
        "emission": dict(_MATRIX, description="N x M emission probabilities"),
        "initial": {
            "type": "array",
            "items": _PROBABILITY,
            "minItems": 1,
            "description": "Initial state probabilities"
        },
        "time_steps": {
            "type": ["integer", "null"],
            "minimum": 0,
            "description": "Nominal observation length (optional)"
        }
    },
    "required": ["states", "symbols", "transition", "emission", "initial"],
    "additionalProperties": True
}


def parse_model_document(document: Dict[str, Any], source: str = "document") -> HiddenMarkovModel:
    """
    Validate a decoded JSON document and build the model.

    Raises:
        ModelFormatError: If validation fails or the tables are inconsistent
    """
    try:
        jsonschema.validate(document, MODEL_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path)
        detail = f" at {location}" if location else ""
        raise ModelFormatError(f"model validation failed{detail}: {e.message}", source) from e

    try:
        return HiddenMarkovModel.from_dict(document)
    except ModelDefinitionError as e:
        raise ModelFormatError(str(e), source) from e


def load_model_document(path: Union[str, Path]) -> HiddenMarkovModel:
    """
    Load and validate a model from a JSON file.

    Raises:
        ModelFormatError: If the file cannot be read, decoded or validated
    """
    path = Path(path)
    logger.debug(f"Loading model document from: {path}")

    encoding = get_config('io', 'encoding') or 'utf-8'
    try:
        with open(path, 'r', encoding=encoding) as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ModelFormatError(f"invalid JSON: {e.msg}", str(path), e.lineno) from e
    except UnicodeDecodeError as e:
        raise ModelFormatError(f"file is not valid {encoding} text", str(path)) from e
    except OSError as e:
        raise ModelFormatError(f"cannot read file: {e.strerror or e}", str(path)) from e

    return parse_model_document(document, source=str(path))


def save_model_document(model: HiddenMarkovModel, path: Union[str, Path]) -> Path:
    """Write a model as a JSON document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Saving model document to: {path}")
    with open(path, 'w', encoding=get_config('io', 'encoding') or 'utf-8') as f:
        json.dump(model.to_dict(), f, indent=2, ensure_ascii=False)

    return path
