"""
Content negotiation.

Two halves of the same concern:

- ``negotiate`` picks the best representation for an ``Accept`` header out of
  a fixed list of media types, using standard quality-value rules.
- ``NegotiatedRoute`` lets routers accept YAML and HTML form bodies. Those
  bodies are decoded into the same mapping a JSON body would produce and the
  request is handed on as ``application/json``, so schema validation does not
  care which content type the client used.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import yaml
from fastapi import Request, Response
from fastapi.routing import APIRoute

from bistro.core.errors import MalformedBody

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
YAML_MEDIA_TYPES = ("application/yaml", "application/yml", "text/yaml", "text/yml")
FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Every body type a resource route will accept
BODY_MEDIA_TYPES = (JSON_MEDIA_TYPE, *FORM_MEDIA_TYPES, *YAML_MEDIA_TYPES)


@dataclass(frozen=True)
class MediaRange:
    type: str
    subtype: str
    q: float
    index: int


def parse_accept(header: str) -> list[MediaRange]:
    """Parse an Accept header into media ranges; malformed entries are skipped."""
    ranges = []
    for index, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media = pieces[0].lower()
        if "/" not in media:
            continue
        type_, _, subtype = media.partition("/")
        q = 1.0
        for param in pieces[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    q = float(value.strip())
                except ValueError:
                    q = 0.0
        ranges.append(MediaRange(type_.strip(), subtype.strip(), max(0.0, min(q, 1.0)), index))
    return ranges


def _priority(media_type: str, ranges: list[MediaRange]) -> Optional[tuple[float, int, int]]:
    """Best (q, specificity, header index) of the ranges matching media_type."""
    type_, _, subtype = media_type.lower().partition("/")
    best = None
    for r in ranges:
        specificity = 0
        if r.type == type_:
            specificity |= 2
        elif r.type != "*":
            continue
        if r.subtype == subtype:
            specificity |= 1
        elif r.subtype != "*":
            continue
        # Most specific range wins, then the higher q, then the earlier entry
        if best is None or (specificity, r.q, -r.index) > (best[1], best[0], -best[2]):
            best = (r.q, specificity, r.index)
    return best


def negotiate_all(accept: Optional[str], supported: Sequence[str]) -> list[str]:
    """Supported media types acceptable to the client, most preferred first."""
    if accept is None or not accept.strip():
        return list(supported)

    ranges = parse_accept(accept)
    ranked = []
    for position, media_type in enumerate(supported):
        priority = _priority(media_type, ranges)
        if priority is None or priority[0] <= 0:
            continue
        q, specificity, index = priority
        ranked.append(((-q, -specificity, index, position), media_type))

    ranked.sort(key=lambda entry: entry[0])
    return [media_type for _, media_type in ranked]


def negotiate(accept: Optional[str], supported: Sequence[str], default: str = JSON_MEDIA_TYPE) -> str:
    """
    Select the representation to send for an Accept header.

    With several equally ranked candidates the first one wins; when nothing
    is acceptable the default is used.
    """
    matches = negotiate_all(accept, supported)
    return matches[0] if matches else default


def media_type_of(content_type: Optional[str]) -> str:
    """``text/yaml; charset=utf-8`` -> ``text/yaml``"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def load_yaml_body(body: bytes) -> Any:
    """Parse a YAML request body, reporting syntax errors as client errors."""
    try:
        return yaml.safe_load(body) if body else None
    except yaml.YAMLError as e:
        logger.info(f"Rejected malformed YAML body: {e}")
        raise MalformedBody(f"Body is not valid YAML: {e}") from e


def _form_to_dict(form) -> dict:
    data: dict[str, Any] = {}
    for key, value in form.multi_items():
        if hasattr(value, "filename"):
            # File parts are not part of any item schema
            continue
        if key in data:
            existing = data[key]
            data[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            data[key] = value
    return data


def _as_json_request(request: Request, payload: Any) -> Request:
    """Rebuild the request so FastAPI reads payload as a JSON body."""
    scope = dict(request.scope)
    scope["headers"] = [
        (name, value) for name, value in request.scope["headers"] if name != b"content-type"
    ] + [(b"content-type", JSON_MEDIA_TYPE.encode())]
    rebuilt = Request(scope, request.receive)
    try:
        rebuilt._body = json.dumps(payload, default=str).encode()
    except (TypeError, ValueError) as e:
        # YAML allows keys JSON cannot express, such as dates
        logger.info(f"Rejected body with non-JSON keys: {e}")
        raise MalformedBody(f"Body cannot be represented as JSON: {e}") from e
    return rebuilt


class NegotiatedRoute(APIRoute):
    """APIRoute that decodes YAML and form bodies before validation."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def negotiated_route_handler(request: Request) -> Response:
            media_type = media_type_of(request.headers.get("content-type"))
            if media_type in YAML_MEDIA_TYPES:
                payload = load_yaml_body(await request.body())
                request = _as_json_request(request, payload)
            elif media_type in FORM_MEDIA_TYPES:
                form = await request.form()
                request = _as_json_request(request, _form_to_dict(form))
            return await original_route_handler(request)

        return negotiated_route_handler
