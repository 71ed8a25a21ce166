# COMPONENT: SNAPSHOT API ROUTES
# REQUIREMENTS SATISFIED: catalog backup download and restore from JSON or uploaded file
"""
src/cinetech/api/routes_snapshot.py

Thin HTTP wrapper over the snapshot codec.

Endpoints:
    - GET  /api/snapshot/export : Download the whole catalog as a JSON attachment
    - POST /api/snapshot/import : Replace the catalog from a JSON request body
    - POST /api/snapshot/upload : Replace the catalog from an uploaded backup file

Imports follow the confirmation protocol: without confirm=true the
catalog is left untouched and the response describes the current and
incoming collection sizes. validate=true additionally runs the
referential and range checks before anything is replaced.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, UploadFile

from cinetech.api.deps import get_codec, get_commands
from cinetech.services.commands import CatalogCommands
from cinetech.services.errors import ImportFormatError
from cinetech.services.snapshot import SnapshotCodec
from cinetech.utils.logging import logger

router = APIRouter(prefix="/api/snapshot", tags=["Snapshot"])


@router.get("/export")
def export_snapshot(codec: SnapshotCodec = Depends(get_codec)):
    text = codec.dumps()
    filename = SnapshotCodec.export_filename()
    logger.info("Snapshot export: %s (%d bytes)", filename, len(text.encode("utf-8")))
    return Response(
        content=text,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
def import_snapshot(
    document: Dict[str, Any] = Body(...),
    confirm: bool = False,
    validate: bool = False,
    commands: CatalogCommands = Depends(get_commands),
):
    return commands.import_snapshot(document, confirm=confirm, validate=validate)


@router.post("/upload")
async def upload_snapshot(
    file: UploadFile,
    confirm: bool = False,
    validate: bool = False,
    commands: CatalogCommands = Depends(get_commands),
):
    data = await file.read()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"{file.filename} is not UTF-8 text") from e
    logger.info("Snapshot upload: %s (%d bytes) confirm=%s", file.filename, len(data), confirm)
    catalog = SnapshotCodec.loads(text)
    return commands.import_snapshot(catalog, confirm=confirm, validate=validate)
