"""Import service: the upload, preview, confirm and export flow."""

from __future__ import annotations

import uuid
from typing import Literal

from pydantic import ValidationError

from assetledger.core.config import ImportConfig
from assetledger.core.exceptions import ParseError, PreviewNotFoundError
from assetledger.core.logging import get_logger
from assetledger.core.protocols import ICacheBackend, IRecordStore
from assetledger.importing import parser, writer
from assetledger.importing.importer import BatchImporter
from assetledger.importing.normalizer import validate
from assetledger.models.imports import ImportReport
from assetledger.models.membership import Actor
from assetledger.models.schema import get_schema
from assetledger.models.validation import PreviewResult

logger = get_logger(__name__)

FileType = Literal["csv", "xlsx"]


def _preview_key(tenant_id: str, preview_id: str) -> str:
    return f"preview:{tenant_id}:{preview_id}"


class ImportService:
    """Façade consumed by the upload and confirmation endpoints."""

    def __init__(
        self,
        store: IRecordStore,
        cache: ICacheBackend,
        importer: BatchImporter,
        config: ImportConfig | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._importer = importer
        self._config = config or ImportConfig()

    def parse_preview(
        self, payload: str | bytes, entity: str, file_type: FileType = "csv"
    ) -> PreviewResult:
        """Parse and validate an upload without persisting anything.

        Raises:
            ParseError: the payload is not readable as the declared file type.
            UnknownEntityError: ``entity`` has no schema.
        """
        schema = get_schema(entity)
        if file_type == "xlsx":
            if isinstance(payload, str):
                raise ParseError("Spreadsheet uploads must be binary")
            dataset = parser.parse_binary(payload)
        else:
            if isinstance(payload, bytes):
                try:
                    payload = payload.decode("utf-8-sig")
                except UnicodeDecodeError as exc:
                    raise ParseError(f"Upload is not valid UTF-8 text: {exc}") from exc
            dataset = parser.parse(payload)

        preview = validate(dataset, schema)
        logger.info(
            "preview_parsed",
            entity=entity,
            file_type=file_type,
            rows=preview.total_row_count,
            diagnostics=len(preview.diagnostics),
        )
        return preview

    def save_preview(self, preview: PreviewResult, tenant_id: str) -> str:
        preview_id = uuid.uuid4().hex
        self._cache.setex(
            _preview_key(tenant_id, preview_id),
            self._config.preview_ttl_seconds,
            preview.model_dump_json(),
        )
        return preview_id

    def load_preview(self, preview_id: str, tenant_id: str) -> PreviewResult:
        raw = self._cache.get(_preview_key(tenant_id, preview_id))
        if raw is None:
            raise PreviewNotFoundError(preview_id)
        try:
            return PreviewResult.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("preview_corrupt", preview_id=preview_id, error=str(exc))
            raise PreviewNotFoundError(preview_id) from exc

    def discard_preview(self, preview_id: str, tenant_id: str) -> None:
        self._cache.delete(_preview_key(tenant_id, preview_id))

    def confirm_import(self, preview: PreviewResult, actor: Actor, tenant_id: str) -> ImportReport:
        """Commit a reviewed preview. Rows are re-normalized from the raw dataset."""
        schema = get_schema(preview.entity)
        return self._importer.import_rows(preview.dataset, schema, actor, tenant_id)

    def template(self, entity: str) -> str:
        return writer.generate_template(get_schema(entity))

    def export(self, entity: str, tenant_id: str) -> str:
        schema = get_schema(entity)
        records = self._store.select(tenant_id, schema.table)
        return writer.export_records(schema, records)
