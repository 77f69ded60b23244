"""
Key format validation.

Turns a raw command payload into a typed CommandRequest. Only the shape of
the ``key`` field is checked here; whether keys exist in storage is the
resolver's concern.
"""

from typing import Any

from forgotten_files.commands.models import (
    CommandName,
    CommandRequest,
    DeleteForgottenRequest,
    GetForgottenListRequest,
    GetForgottenRequest,
    KeyBatch,
)
from forgotten_files.core.exceptions import FormatError, UnknownCommandError

COMMAND_FIELD = "c"
KEY_FIELD = "key"


def parse_command_name(payload: Any) -> CommandName:
    """
    Extract the command name from a request payload.

    Raises:
        UnknownCommandError: If the payload is not an object or ``c`` is not
            a known command name
    """
    if not isinstance(payload, dict):
        raise UnknownCommandError(None, details={"payload_type": type(payload).__name__})

    name = payload.get(COMMAND_FIELD)
    try:
        return CommandName(name)
    except (ValueError, TypeError):
        raise UnknownCommandError(name)


def validate_key_field(command: CommandName, raw: Any, present: bool) -> KeyBatch | None:
    """
    Check the ``key`` field against what the command accepts.

    Args:
        command: Command being validated
        raw: Raw value of the key field (ignored if not present)
        present: Whether the caller supplied the key field at all

    Returns:
        KeyBatch for batch commands, None for getForgottenList

    Raises:
        FormatError: If a batch command's key is missing, null, not an
            array, or an empty array
    """
    if command == CommandName.GET_FORGOTTEN_LIST:
        return None

    if not present:
        raise FormatError("Key field is required", command=command.value, key_present=False)
    if raw is None:
        raise FormatError("Key field must not be null", command=command.value, key=raw)
    if not isinstance(raw, list):
        raise FormatError("Key field must be an array of strings", command=command.value, key=raw)
    if not raw:
        raise FormatError("Key field must not be empty", command=command.value, key=raw)

    return KeyBatch(raw=raw)


def parse_request(payload: Any) -> CommandRequest:
    """
    Parse a decoded JSON payload into a typed request.

    Raises:
        UnknownCommandError: If the command name is not recognised
        FormatError: If the key field does not fit the command
    """
    command = parse_command_name(payload)
    present = KEY_FIELD in payload
    batch = validate_key_field(command, payload.get(KEY_FIELD), present)

    if command == CommandName.GET_FORGOTTEN:
        return GetForgottenRequest(batch=batch)
    if command == CommandName.DELETE_FORGOTTEN:
        return DeleteForgottenRequest(batch=batch)
    return GetForgottenListRequest()
