"""
OpenAPI document publishing.

The document is generated from the application's routes once per process:

- precomputed (production): written to ``openapi.json`` and ``openapi.yaml``
  under the configured directory and served from there,
- live (development): kept in memory.

Either way it is built at most once, on startup or on the first request,
whichever comes first.
"""
import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

import yaml
from fastapi import APIRouter, FastAPI, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import FileResponse, Response

from bistro.core.negotiation import JSON_MEDIA_TYPE, negotiate

logger = logging.getLogger(__name__)

DocumentFormat = Literal["json", "yaml"]

DOCUMENT_MEDIA_TYPES = ["application/json", "application/yaml", "text/yaml", "text/yml"]
YAML_RESPONSE_MEDIA_TYPE = "text/yaml"

FILENAMES = {"json": "openapi.json", "yaml": "openapi.yaml"}
MEDIA_TYPES = {"json": JSON_MEDIA_TYPE, "yaml": YAML_RESPONSE_MEDIA_TYPE}

# Request bodies accepted by every resource route, advertised in the document
CONSUMED_MEDIA_TYPES = [
    "application/json",
    "multipart/form-data",
    "text/yaml",
    "text/yml",
    "application/yaml",
    "application/yml",
    "application/x-www-form-urlencoded",
]


class _NoAliasDumper(yaml.SafeDumper):
    """Write repeated sub-schemas out in full instead of as YAML anchors."""

    def ignore_aliases(self, data):
        return True


@dataclass(frozen=True)
class OpenAPIDocument:
    json: str
    yaml: str

    def render(self, fmt: DocumentFormat) -> str:
        return self.json if fmt == "json" else self.yaml


def _advertise_body_types(schema: dict) -> dict:
    """Declare the YAML and form variants wherever a JSON body is documented."""
    for path_item in schema.get("paths", {}).values():
        for operation in path_item.values():
            if not isinstance(operation, dict):
                continue
            content = operation.get("requestBody", {}).get("content")
            if not content or JSON_MEDIA_TYPE not in content:
                continue
            for media_type in CONSUMED_MEDIA_TYPES:
                content.setdefault(media_type, content[JSON_MEDIA_TYPE])
    return schema


def build_document(app: FastAPI) -> OpenAPIDocument:
    """Render the application's OpenAPI schema in both formats."""
    schema = _advertise_body_types(app.openapi())
    return OpenAPIDocument(
        json=json.dumps(schema),
        yaml=yaml.dump(schema, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True),
    )


class DocumentPublisher:
    """Builds the API document once and serves it in either format."""

    def __init__(self, precompute: bool, output_dir: Path):
        self.precompute = precompute
        self.output_dir = Path(output_dir)
        self._document: Optional[OpenAPIDocument] = None
        self._lock = threading.Lock()

    @property
    def published(self) -> bool:
        return self._document is not None

    def path_for(self, fmt: DocumentFormat) -> Path:
        return self.output_dir / FILENAMES[fmt]

    def publish(self, app: FastAPI) -> OpenAPIDocument:
        """Generate the document; later calls return the first result."""
        if self.published:
            return self._document

        with self._lock:
            if not self.published:
                document = build_document(app)
                if self.precompute:
                    self.output_dir.mkdir(parents=True, exist_ok=True)
                    for fmt in FILENAMES:
                        self.path_for(fmt).write_text(document.render(fmt), encoding="utf-8")
                    logger.info(f"Wrote OpenAPI documents to {self.output_dir}")
                else:
                    logger.info("Generated in-memory OpenAPI documents")
                self._document = document

        return self._document

    def get_document(self, app: FastAPI, fmt: DocumentFormat) -> bytes:
        document = self.publish(app)
        if self.precompute:
            return self.path_for(fmt).read_bytes()
        return document.render(fmt).encode("utf-8")

    def response(self, app: FastAPI, fmt: DocumentFormat) -> Response:
        """Response for one format: the stored file in production, memory otherwise."""
        if self.precompute:
            self.publish(app)
            return FileResponse(self.path_for(fmt), media_type=MEDIA_TYPES[fmt])
        return Response(content=self.get_document(app, fmt), media_type=MEDIA_TYPES[fmt])


def format_for(media_type: str) -> DocumentFormat:
    return "json" if media_type == JSON_MEDIA_TYPE else "yaml"


def create_docs_router(publisher: DocumentPublisher) -> APIRouter:
    """Document endpoints; the bare-path aliases and the UI exist in live mode only."""
    router = APIRouter(tags=["documentation"])

    @router.get(
        "/openapi",
        summary="OpenAPI Docs",
        description="OpenAPI documentation for the API",
        responses={200: {"content": {media_type: {} for media_type in DOCUMENT_MEDIA_TYPES}}},
    )
    def openapi_negotiated(request: Request):
        media_type = negotiate(request.headers.get("accept"), DOCUMENT_MEDIA_TYPES)
        return publisher.response(request.app, format_for(media_type))

    @router.get("/openapi/json", include_in_schema=False)
    def openapi_json(request: Request):
        return publisher.response(request.app, "json")

    @router.get("/openapi/yaml", include_in_schema=False)
    def openapi_yaml(request: Request):
        return publisher.response(request.app, "yaml")

    if not publisher.precompute:
        @router.get("/openapi.json", include_in_schema=False)
        def openapi_json_file(request: Request):
            return publisher.response(request.app, "json")

        @router.get("/openapi.yaml", include_in_schema=False)
        def openapi_yaml_file(request: Request):
            return publisher.response(request.app, "yaml")

        @router.get("/docs", include_in_schema=False)
        def swagger_ui(request: Request):
            return get_swagger_ui_html(
                openapi_url="/openapi.json",
                title=f"{request.app.title} - Swagger UI",
            )

    return router
