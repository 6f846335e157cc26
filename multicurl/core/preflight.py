"""Checks run on a request spec before it is dispatched."""

import json
from typing import Annotated

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from multicurl.ports.request import JsonBody, RequestSpec

__all__ = ["InvalidInputError", "check_spec"]

# No length cap: long query strings are valid URLs
_http_url_adapter = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)


class InvalidInputError(ValueError):
    """The spec cannot be sent as given."""


def check_spec(spec: RequestSpec) -> None:
    """Validate URL and JSON body of ``spec``.

    Raises:
        InvalidInputError: If the URL is not an http(s) URL or the JSON body
            does not parse.
    """
    if not spec.url.startswith(("http://", "https://")):
        raise InvalidInputError(f"Invalid URL {spec.url}: must start with http:// or https://")
    try:
        _http_url_adapter.validate_python(spec.url)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid URL {spec.url}: {e.errors()[0]['msg']}") from e

    if isinstance(spec.body, JsonBody):
        try:
            json.loads(spec.body.text)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"JSON is not valid: {e}") from e
