"""Error taxonomy mapper — MongoDB failures to ``HyperErr`` values.

Driver exceptions, Data API failures and raw error mappings are reduced
to the port's ``{ok: false, status, msg}`` shape. Errors that are
already normalized pass through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from hypermongo.adapters.base.exceptions import HyperError
from hypermongo.models.response import HyperErr, is_hyper_err

logger = logging.getLogger(__name__)

DUPLICATE_KEY = 11000
INDEX_KEY_SPECS_CONFLICT = 86

DEFAULT_STATUS = 500
DEFAULT_MESSAGE = "an error occurred"

# native code -> (status, message template)
ERROR_TABLE: dict[int, tuple[int, str]] = {
    DUPLICATE_KEY: (409, "{subject} already exists"),
    INDEX_KEY_SPECS_CONFLICT: (409, "{subject} fields do not match the existing index with the same name"),
}


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders from ``context``; unknown ones are kept."""
    return template.format_map(_Placeholders(context))


def _field(err: Any, name: str) -> Any:
    if isinstance(err, Mapping):
        return err.get(name)
    return getattr(err, name, None)


def error_code(err: Any) -> int | None:
    """Extract the MongoDB error code, looking inside bulk-write details."""
    details = _field(err, "details")
    if isinstance(details, Mapping):
        write_errors = details.get("writeErrors") or []
        if write_errors and isinstance(write_errors[0], Mapping):
            return write_errors[0].get("code")
    code = _field(err, "code")
    return code if isinstance(code, int) else None


def _message(err: Any) -> str:
    if isinstance(err, Mapping):
        message = err.get("message")
    elif isinstance(err, BaseException):
        message = str(err)
    else:
        message = getattr(err, "message", None)
    return message or DEFAULT_MESSAGE


def mongo_err_to_hyper_err(context: Mapping[str, Any]) -> Callable[[Any], HyperErr]:
    """Build a mapper that normalizes errors for one call site.

    Args:
        context: Placeholder values for the message templates, typically
            ``subject`` (what was being touched) and ``db``.

    Returns:
        A function taking any raised error or error mapping and returning
        a ``HyperErr``.
    """

    def to_hyper_err(err: Any) -> HyperErr:
        if isinstance(err, HyperError):
            return err.err
        if is_hyper_err(err):
            return err if isinstance(err, HyperErr) else HyperErr.model_validate(err)

        code = error_code(err)
        if code in ERROR_TABLE:
            status, template = ERROR_TABLE[code]
            return HyperErr(status=status, msg=render(template, context))

        status = _field(err, "status")
        return HyperErr(
            status=status if isinstance(status, int) else DEFAULT_STATUS,
            msg=_message(err),
        )

    return to_hyper_err


def handle_hyper_err(err: HyperErr) -> HyperErr:
    """Final step of every port operation: log and hand the error back as a value."""
    if err.status >= 500:
        logger.warning("Data operation failed (%s): %s", err.status, err.msg)
    else:
        logger.debug("Data operation rejected (%s): %s", err.status, err.msg)
    return err
