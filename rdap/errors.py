"""Errors raised by the RDAP client."""

from __future__ import annotations

import enum
from collections.abc import Iterable


class ClientErrorType(enum.Enum):
    """The kind of failure a ClientError reports."""

    INPUT_ERROR = 1
    BOOTSTRAP_NOT_SUPPORTED = 2
    BOOTSTRAP_NO_MATCH = 3
    WRONG_RESPONSE_TYPE = 4
    NO_WORKING_SERVERS = 5
    OBJECT_DOES_NOT_EXIST = 6
    RDAP_SERVER_ERROR = 7


class ClientError(Exception):
    """An RDAP client failure of a known kind."""

    def __init__(self, error_type: ClientErrorType, text: str) -> None:
        super().__init__(text)
        self.type = error_type
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"ClientError({self.type!r}, {self.text!r})"


def is_client_error(error_type: ClientErrorType, error: BaseException | None) -> bool:
    """Return True if ``error`` is a ClientError of kind ``error_type``."""
    return isinstance(error, ClientError) and error.type is error_type


def client_error_from_rdap_error(
    error_code: int, title: str, description: Iterable[str]
) -> ClientError:
    """Build the ClientError for an RDAP error response from a server."""
    return ClientError(
        ClientErrorType.RDAP_SERVER_ERROR,
        f"Server returned error code {error_code}, title='{title}', "
        f"description='{' '.join(description)}'",
    )