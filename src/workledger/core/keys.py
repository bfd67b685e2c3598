"""Redis key namespace for classes, objects and their queues.

These formats are read by external tooling; change them only together with
every consumer of the store.
"""

from __future__ import annotations

from workledger.core.exceptions import InvalidArgumentError

DELIMITER = ":"
OBJECT_COUNTER = "object::counter"
OBJECT_COUNTER_FIELD = "id"


def validate_identifier(value: object, name: str) -> str:
    """Return ``value`` if it is usable inside a key, else raise."""
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{name} must be a non-empty string, got {value!r}")
    if DELIMITER in value:
        raise InvalidArgumentError(f"{name} must not contain {DELIMITER!r}: {value!r}")
    return value


def class_key(class_id: str) -> str:
    return f"class:{validate_identifier(class_id, 'class_id')}"


def objects_in_process_key(class_id: str) -> str:
    return f"objects-in-process:class:{validate_identifier(class_id, 'class_id')}"


def processed_objects_key(class_id: str) -> str:
    return f"processed-objects:class:{validate_identifier(class_id, 'class_id')}"


def classes_monitored_key(class_type: str) -> str:
    return f"classes-monitored:{validate_identifier(class_type, 'class_type')}"


def classes_in_process_key(class_type: str) -> str:
    return f"classes-in-process:{validate_identifier(class_type, 'class_type')}"


def class_objects_key(class_id: str) -> str:
    return f"class:{validate_identifier(class_id, 'class_id')}:objects"


def object_key(object_id: str) -> str:
    return f"object:{validate_identifier(object_id, 'object_id')}"
