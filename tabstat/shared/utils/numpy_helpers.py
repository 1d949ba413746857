import json
from typing import Any

import numpy as np


def convert_to_primitives_nested(obj: Any) -> Any:
    """
    Convert numpy values in a nested structure (list, tuple or dict) to Python primitives.

    Args:
        obj (Any): A list, tuple, dict, numpy array or numpy scalar, possibly nested.

    Returns:
        Any: The same structure with numpy arrays turned into lists and numpy scalars into
        Python numbers. Tuples become lists, dict keys are converted as well.
    """
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (list, tuple)):
        return [convert_to_primitives_nested(item) for item in obj]
    elif isinstance(obj, dict):
        return {convert_to_primitives_nested(key): convert_to_primitives_nested(value) for key, value in obj.items()}
    elif isinstance(obj, (np.number, np.bool_)):
        return obj.item()
    else:
        return obj  # Return as is if it's not a container or numpy value


def to_json_string(obj: Any) -> str:
    """Serialize a nested structure that may contain numpy values to a JSON string with sorted keys."""
    return json.dumps(convert_to_primitives_nested(obj), sort_keys=True)
