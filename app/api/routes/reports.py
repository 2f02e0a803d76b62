"""Report upload and (placeholder) analysis."""
import traceback
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from app.api.deps import get_current_user
from app.core.config import settings
from app.models.schemas import ReportAnalysisResponse
from app.services.logger import log_warning
from app.services.report_analyzer import analyze_bytes

router = APIRouter(prefix="/reports", tags=["reports"])


def _report_path(filename: str) -> Path:
    folder = Path(settings.UPLOAD_DIR) / "reports"
    folder.mkdir(parents=True, exist_ok=True)
    return folder / f"{uuid.uuid4().hex}_{Path(filename).name}"


@router.post("/analyze", response_model=ReportAnalysisResponse)
async def analyze_report(
    file: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
):
    if file is None or not file.filename:
        return JSONResponse(status_code=400, content={"error": "No file uploaded."})

    # Declared size first, then a bounded read for uploads that omit it
    if file.size is not None and file.size > settings.MAX_REPORT_BYTES:
        return JSONResponse(status_code=400, content={"error": "File too large."})
    data = await file.read(settings.MAX_REPORT_BYTES + 1)
    if len(data) > settings.MAX_REPORT_BYTES:
        return JSONResponse(status_code=400, content={"error": "File too large."})

    path = _report_path(file.filename)
    try:
        path.write_bytes(data)
        analysis = analyze_bytes(path.read_bytes())
    except Exception as e:
        log_warning("Error analyzing report", e)
        traceback.print_exc()
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process the uploaded report.", "details": str(e)},
        )
    finally:
        # Temporary upload, never kept
        path.unlink(missing_ok=True)

    return {"message": "Analysis complete", "analysis": analysis}
