"""Endpoint descriptions for the distribution API."""

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from lingohub.domain.errors import DecodingError
from lingohub.domain.types import ArtifactDescriptor, Environment

Response = TypeVar("Response")

CHECK_PATH = "v1/distributions/check"
DISTRIBUTION_TYPE = "MOBILE_SDK_PYTHON"
CLIENT_AGENT_NAME = "Lingohub-Python-SDK"


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Endpoint(Generic[Response]):
    """A request description plus the function that decodes its 200 body.

    ``path`` is joined to the client's base URL unless it is already an
    absolute https URL. Parameters go into the query string for GET and
    into a JSON body for every other method.
    """

    path: str
    decode: Callable[[bytes], Response]
    method: HTTPMethod = HTTPMethod.GET
    parameters: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


def describe_validation_error(error: ValidationError) -> DecodingError:
    """Turn the first pydantic error into a DecodingError with a dotted path."""
    first = error.errors()[0]
    path = ".".join(str(part) for part in first.get("loc", ()))
    return DecodingError(f"{first.get('msg', 'invalid value')} ({first.get('type', 'unknown')})", path)


def decode_json(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodingError(f"Response body is not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise DecodingError(f"Response body is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e


def model_decoder(model: type[BaseModel]) -> Callable[[bytes], Any]:
    """Build a decode function that validates a JSON body into ``model``."""

    def decode(data: bytes) -> Any:
        payload = decode_json(data)
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise describe_validation_error(e) from e

    return decode


def check_endpoint(
    api_key: str,
    app_version: str,
    sdk_version: str,
    installed_artifact_id: Optional[str],
    environment: Environment,
    device_id: Optional[str],
    language: Optional[str] = None,
    distribution_type: str = DISTRIBUTION_TYPE,
) -> Endpoint[ArtifactDescriptor]:
    """Build the distribution check request."""
    parameters: dict[str, Any] = {
        "distributionType": distribution_type,
        "distributionEnvironment": Environment(environment).value,
        "clientVersion": app_version,
        "clientUser": device_id or str(uuid.uuid4()).upper(),
        "clientAgent": f"{CLIENT_AGENT_NAME}/{sdk_version}",
    }
    if installed_artifact_id:
        parameters["clientRelease"] = installed_artifact_id
    if language:
        parameters["clientLanguage"] = language

    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    return Endpoint(
        path=CHECK_PATH,
        method=HTTPMethod.POST,
        parameters=parameters,
        headers=headers,
        decode=model_decoder(ArtifactDescriptor),
    )
