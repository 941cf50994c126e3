"""
Input features of the employment status model

Codes follow the labour force survey encoding used by the backend.
"""

from typing import Any, Dict, Mapping

from ..exceptions import ValidationError

FEATURE_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    'DISTRICT': {
        'label': "District",
        'type': "select",
        'options': {
            11: "Colombo", 12: "Gampaha", 13: "Kaluthara",
            21: "Kandy", 22: "Matale", 23: "Nuwara Eliya",
            31: "Galle", 32: "Mathara", 33: "Hambanthota",
            41: "Jaffna", 42: "Mannar", 43: "Vavuniya", 44: "Mulathivu", 45: "Kilinochchi",
            51: "Batticaloa", 52: "Ampara", 53: "Trincomalee",
            61: "Kurunegala", 62: "Puttalam",
            71: "Anuradhapura", 72: "Polonnaruwa",
            81: "Badulla", 82: "Moneragala",
            91: "Rathnapura", 92: "Kegalle",
        },
    },
    'SEX': {
        'label': "Sex",
        'type': "select",
        'options': {1: "Male", 2: "Female"},
    },
    'AGE': {
        'label': "Age",
        'type': "number",
        'min': 15,
        'max': 99,
    },
    'MARITAL': {
        'label': "Marital Status",
        'type': "select",
        'options': {1: "Never Married", 2: "Married", 3: "Widowed", 5: "Divorced/Separated"},
    },
    'EDU': {
        'label': "Education Level",
        'type': "select",
        'options': {
            0: "Studying/Studied Grade 1", 1: "Passed Grade 1", 2: "Passed Grade 2",
            3: "Passed Grade 3", 4: "Passed Grade 4", 5: "Passed Grade 5",
            6: "Passed Grade 6", 7: "Passed Grade 7", 8: "Passed Grade 8",
            9: "Passed Grade 9", 10: "Passed Grade 10", 11: "Passed G.C.E (O/L) / N.C.E",
            12: "Passed Grade 12", 13: "Passed G.C.E (A/L) / H.N.C.E", 14: "Passed G.A.Q. / G.S.Q",
            15: "Degree", 16: "Postgraduate Degree / Diploma", 17: "Special Educational Institutions",
            18: "Post Graduate - M", 19: "Post Graduate - PhD",
        },
    },
    'Language_Profile_Encoded': {
        'label': "Language Profile",
        'type': "select",
        'options': {
            0: "ENG", 1: "ENG+SIN", 2: "ENG+SIN+TAMIL",
            3: "ENG+TAMIL", 4: "None", 5: "SIN",
            6: "SIN+TAMIL", 7: "TAMIL",
        },
    },
    'Disability_Category_Encoded': {
        'label': "Disability Category",
        'type': "select",
        'options': {0: "None", 1: "Mild", 2: "Moderate"},
    },
}

DEFAULT_FEATURES: Dict[str, int] = {
    'DISTRICT': 11,
    'SEX': 1,
    'AGE': 25,
    'MARITAL': 1,
    'EDU': 10,
    'Language_Profile_Encoded': 3,
    'Disability_Category_Encoded': 0,
}

TARGET_COLUMN = 'Employment_Status_Encoded'


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise
        return int(number)


def validate_features(features: Mapping[str, Any]) -> Dict[str, int]:
    """
    Convert feature values to integers and check them against their definitions

    Every feature in FEATURE_DEFINITIONS is required; extra keys are rejected.

    Raises:
        ValidationError: On the first missing, unknown, non-numeric or out-of-range value
    """
    unknown = set(features) - set(FEATURE_DEFINITIONS)
    if unknown:
        raise ValidationError(f"Unknown features: {', '.join(sorted(unknown))}")

    validated = {}
    for key, definition in FEATURE_DEFINITIONS.items():
        if key not in features:
            raise ValidationError(f"Missing value for {key}")
        raw = features[key]
        try:
            value = _to_int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid value for {key}: {raw}")

        if definition['type'] == 'select' and value not in definition['options']:
            raise ValidationError(f"Invalid value for {key}: {raw}")
        if definition['type'] == 'number' and not definition['min'] <= value <= definition['max']:
            raise ValidationError(
                f"Invalid value for {key}: {raw} (expected {definition['min']}-{definition['max']})"
            )
        validated[key] = value
    return validated


def features_from_row(row: Mapping[str, Any]) -> Dict[str, int]:
    """
    Pick the model features out of a dataset row

    Values that are missing or not integers fall back to DEFAULT_FEATURES.
    """
    features = {}
    for key, default in DEFAULT_FEATURES.items():
        try:
            features[key] = _to_int(row.get(key))
        except (TypeError, ValueError):
            features[key] = default
    return features


def describe(features: Mapping[str, int]) -> Dict[str, str]:
    """Human-readable labels for encoded feature values"""
    described = {}
    for key, value in features.items():
        definition = FEATURE_DEFINITIONS.get(key)
        if definition and definition['type'] == 'select':
            described[definition['label']] = definition['options'].get(value, str(value))
        elif definition:
            described[definition['label']] = str(value)
    return described
