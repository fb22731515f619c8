from fastapi import APIRouter, HTTPException, UploadFile

from forecaster.models.project import Project
from forecaster.models.throughput import ThroughputRecord
from forecaster.services.sheet_parser import parse_project_sheet, parse_throughput_sheet

router = APIRouter(tags=["projects"])


def _check_excel(file: UploadFile) -> None:
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if ext not in ("xlsx", "xls"):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '.{ext}'. Please upload .xlsx or .xls",
        )


@router.post("/projects/upload", response_model=Project)
async def upload_project_sheet(file: UploadFile):
    """Upload an Excel sheet of work packages and return the parsed Project."""
    _check_excel(file)
    try:
        project = parse_project_sheet(file.file, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return project


@router.post("/throughput/upload", response_model=list[ThroughputRecord])
async def upload_throughput_sheet(file: UploadFile):
    """Upload an Excel sheet of daily completion counts."""
    _check_excel(file)
    try:
        records = parse_throughput_sheet(file.file)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return records
