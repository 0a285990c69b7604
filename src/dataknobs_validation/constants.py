"""Validation keys, default messages and patterns shared by all validators."""

import re


class ComparisonValidationKeys:
    """Keys of the validators that compare a field against another path."""

    EQUALS = "equals"
    DIFF = "different"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"


class ValidationKeys(ComparisonValidationKeys):
    """Canonical validator keys."""

    DATE = "date"
    EMAIL = "email"
    ENUM = "enum"
    LIST = "list"
    MAX = "max"
    MAX_LENGTH = "maxlength"
    MIN = "min"
    MIN_LENGTH = "minlength"
    PASSWORD = "password"
    PATTERN = "pattern"
    REQUIRED = "required"
    STEP = "step"
    TYPE = "type"
    URL = "url"
    # reserved report key for failures raised while descending into a model
    MODEL = "model"


COMPARISON_KEYS = (
    ComparisonValidationKeys.EQUALS,
    ComparisonValidationKeys.DIFF,
    ComparisonValidationKeys.LESS_THAN,
    ComparisonValidationKeys.LESS_THAN_OR_EQUAL,
    ComparisonValidationKeys.GREATER_THAN,
    ComparisonValidationKeys.GREATER_THAN_OR_EQUAL,
)

# reserved option names
MESSAGE_OPTION = "message"
LABEL_OPTION = "label"
COMPARISON_KEY_OPTION = "comparison_key"

DEFAULT_ERROR_MESSAGES = {
    "REQUIRED": "This field is required",
    "MIN": "The minimum value is {0}",
    "MAX": "The maximum value is {0}",
    "MIN_LENGTH": "The minimum length is {0}",
    "MAX_LENGTH": "The maximum length is {0}",
    "PATTERN": "The value does not match the pattern",
    "EMAIL": "The value is not a valid email",
    "URL": "The value is not a valid URL",
    "TYPE": "Invalid type. Expected {0}, received {1}",
    "MODEL_TYPE": "Value must be an instance of {0}",
    "STEP": "Invalid value. Not a step of {0}",
    "DATE": "Invalid value. not a valid Date",
    "DEFAULT": "There is an Error",
    "PASSWORD": (
        "Must be at least 8 characters and contain one of number, lower and upper "
        "case letters, and special character (@$!%*?&_-.,)"
    ),
    "LIST": "Invalid list of {0}",
    "ENUM": "Invalid value. Expected one of: {0}",
    "EQUALS": "This field must be equal to field {0}",
    "DIFF": "This field must be different from field {0}",
    "LESS_THAN": "This field must be less than field {0}",
    "LESS_THAN_OR_EQUAL": "This field must be less than or equal to field {0}",
    "GREATER_THAN": "This field must be greater than field {0}",
    "GREATER_THAN_OR_EQUAL": "This field must be greater than or equal to field {0}",
}

COMPARISON_ERROR_MESSAGES = {
    "INVALID_PATH": "Invalid path argument. Expected non-empty string but received: '{0}'",
    "CONTEXT_NOT_OBJECT": (
        "Unable to access parent at level {0} for path '{1}': current context is not an object"
    ),
    "NO_PARENT": "Unable to access parent at level {0} for path '{1}': no parent available",
    "PROPERTY_NOT_EXIST": "Failed to resolve path {0}: property '{1}' does not exist.",
    "PROPERTY_NOT_EXIST_ON_PARENT": (
        "Failed to resolve path {0}: property '{1}' does not exist on parent."
    ),
    "PROPERTY_NOT_EXIST_AFTER_PARENTS": (
        "Failed to resolve path {0}: property '{1}' does not exist after {2} parent level(s)."
    ),
    "PROPERTY_INVALID": "Failed to resolve path {0}: property '{1}' is invalid or does not exist.",
    "UNSUPPORTED_TYPES_COMPARISON": "Unsupported types for comparison: '{0}' and '{1}'",
    "NULL_OR_UNDEFINED_COMPARISON": "Comparison failed due to null or undefined value",
    "INVALID_DATE_COMPARISON": "Invalid Date objects are not comparable",
    "TYPE_MISMATCH_COMPARISON": "Cannot compare values of different types: {0} and {1}.",
    "NAN_COMPARISON": "Comparison not supported for NaN values",
}

DEFAULT_PATTERNS = {
    "EMAIL": re.compile(
        r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+)*"
        r"@(?:[a-zA-Z0-9](?:[a-z0-9-]*[a-zA-Z0-9])?\.)+[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
    ),
    "URL": re.compile(
        r"^(?:(?:(?:https?|ftp):)?//)"
        r"(?:\S+(?::\S*)?@)?"
        r"(?:"
        r"(?!(?:10|127)(?:\.\d{1,3}){3})"
        r"(?!(?:169\.254|192\.168)(?:\.\d{1,3}){2})"
        r"(?!172\.(?:1[6-9]|2\d|3[0-1])(?:\.\d{1,3}){2})"
        r"(?:[1-9]\d?|1\d\d|2[01]\d|22[0-3])"
        r"(?:\.(?:1?\d{1,2}|2[0-4]\d|25[0-5])){2}"
        r"(?:\.(?:[1-9]\d?|1\d\d|2[0-4]\d|25[0-4]))"
        r"|"
        r"(?:(?:[a-z0-9\u00a1-\uffff][a-z0-9\u00a1-\uffff_-]{0,62})?[a-z0-9\u00a1-\uffff]\.)+"
        r"(?:[a-z\u00a1-\uffff]{2,}\.?)"
        r")"
        r"(?::\d{2,5})?"
        r"(?:[/?#]\S*)?$",
        re.IGNORECASE,
    ),
    "PASSWORD": {
        "CHAR8_ONE_OF_EACH": re.compile(
            r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&_\-.,])[A-Za-z\d@$!%*?&_\-.,]{8,}$"
        ),
    },
}

# environment variable prefix and configuration type of the settings overrides
ENV_PREFIX = "DATAKNOBS_"
SETTINGS_TYPE = "validation"
