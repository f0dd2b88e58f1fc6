"""
Import API routes.

POST /api/imports/spreadsheet - Import a catalog spreadsheet upload
"""

from io import BytesIO
from fastapi import APIRouter, Query, UploadFile, File
from fastapi.responses import JSONResponse
import structlog

from config import settings
from exceptions import AppError, ValidationError
from parsers.spreadsheet_parser import SPREADSHEET_EXTENSIONS
from services.import_service import CatalogImportService, build_dispatcher_factory

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def get_import_service(dry_run: bool = True) -> CatalogImportService:
    """Dry runs stay offline; other runs connect up front."""
    dispatcher_factory = build_dispatcher_factory()
    if dry_run:
        return CatalogImportService(dispatcher_factory=dispatcher_factory)
    return CatalogImportService(dispatcher=dispatcher_factory())


# ===================
# ROUTES
# ===================

@router.post("/spreadsheet")
async def import_spreadsheet(
    file: UploadFile = File(...),
    dry_run: bool = Query(True, description="Map and validate only; nothing is written"),
):
    """
    Import perfumes from an .xlsx or .csv export.

    First sheet, header row. Returns the import summary; in a dry run the
    mapped candidates are included.

    Raises:
        422: Unsupported file type or unreadable spreadsheet
        500: Database credentials missing (non-dry runs)
    """
    filename = file.filename or "upload"
    logger.info(
        "spreadsheet_upload_started",
        filename=filename,
        content_type=file.content_type,
        dry_run=dry_run
    )

    try:
        if not filename.lower().endswith(SPREADSHEET_EXTENSIONS):
            raise ValidationError(
                message="Unsupported file type",
                code="UNSUPPORTED_FILE_TYPE",
                details={"filename": filename, "accepted": list(SPREADSHEET_EXTENSIONS)}
            )

        service = get_import_service(dry_run)

        content = await file.read()
        if len(content) > settings.max_upload_mb * 1024 * 1024:
            raise ValidationError(
                message=f"File larger than {settings.max_upload_mb} MB",
                code="FILE_TOO_LARGE",
                details={"filename": filename, "bytes": len(content)}
            )

        summary = service.import_spreadsheet(
            BytesIO(content),
            dry_run=dry_run,
            filename=filename,
        )

        logger.info("spreadsheet_upload_completed", filename=filename, result=summary.summary_line())
        return summary.to_dict()

    except Exception as e:
        return handle_error(e)
