"""Mini README: FastAPI service exposing the langar ledgers.

Structure:
    * create_application - application factory wiring stores, routes and
      exception handlers.
    * Request models - loose JSON bodies; field validation happens in the
      stores so the same rules apply to the CLI and tests.

Route paths and response shapes match the endpoints the existing front-end
calls (``/update-attendance``, ``/update-donations`` and so on). Every
mutation answers ``{"success": true, "message": ...}``; failures answer
``{"success": false, "error": ...}`` with 400/404/409/500 depending on the
``LedgerError`` raised.
"""

from __future__ import annotations

import asyncio
import io
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ..backups import BackupArchiver, BackupScheduler, zip_directory
from ..configuration import LedgerSettings, get_settings
from ..errors import LedgerError
from ..finance import summarise_month, summarise_overall
from ..logging_utils import configure_root_logger, get_logger
from ..members import ImageStore
from ..stores import LedgerStores

LOGGER = get_logger(__name__)


class AttendanceRequest(BaseModel):
    year: Any = None
    month: Any = None
    day: Any = None
    attendance: Any = None


class DonationRequest(BaseModel):
    year: Any = None
    month: Any = None
    rollNo: Any = None
    amount: Any = None
    type: Optional[str] = None
    kind: Optional[str] = None


class ExpenseRequest(BaseModel):
    year: Any = None
    month: Any = None
    amount: Any = None
    description: Any = None


class ExpenseDeleteRequest(BaseModel):
    year: Any = None
    month: Any = None
    index: Any = None


class MemberDeleteRequest(BaseModel):
    rollNo: Any = None


def _zip_response(payload: bytes, filename: str) -> Response:
    return Response(
        content=payload,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _has_upload(image: Optional[UploadFile]) -> bool:
    return image is not None and bool(image.filename)


def create_application(
    settings: Optional[LedgerSettings] = None,
    stores: Optional[LedgerStores] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(environment=settings.environment)
    uploads_directory = settings.uploads_path
    stores = stores or LedgerStores.from_directory(settings.data_directory, uploads_directory)
    images = stores.images or ImageStore(uploads_directory)
    archiver = BackupArchiver(
        settings.data_directory,
        settings.backup_path,
        capacity=settings.backup_capacity,
        exclude=[uploads_directory],
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stores.removal.recover()
        task = None
        if settings.backup_schedule_enabled:
            scheduler = BackupScheduler(archiver)
            task = asyncio.create_task(scheduler.run_forever(settings.backup_poll_seconds))
        yield
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="Langar Ledger", version="1.0.0", lifespan=lifespan)
    app.state.stores = stores
    app.state.archiver = archiver
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.mount("/images", StaticFiles(directory=str(uploads_directory)), name="images")

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, error: LedgerError) -> JSONResponse:
        LOGGER.warning("%s %s failed: %s", request.method, request.url.path, error.message)
        return JSONResponse(status_code=error.status_code, content={"success": False, "error": error.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, error: RequestValidationError) -> JSONResponse:
        LOGGER.warning("%s %s rejected: %s", request.method, request.url.path, error.errors())
        return JSONResponse(status_code=400, content={"success": False, "error": "Missing or invalid data"})

    @app.get("/", response_class=HTMLResponse)
    def dashboard(request: Request) -> HTMLResponse:
        """Render a read-only overview of the roster and the money totals."""

        members = stores.members.list_members()
        active = [member for member in members if str(member.get("name", "")).strip()]
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "member_count": len(members),
                "active_count": len(active),
                "summary": summarise_overall(stores.donations, stores.expenses).as_dict(),
                "counters": stores.counters.snapshot(),
            },
        )

    # -- members ---------------------------------------------------------

    def _write_member(write: Any, roll_no: Optional[str], image: Optional[UploadFile], **fields: Any) -> Any:
        """Run a roster write; an uploaded image is kept only if the write succeeds."""

        if not (_has_upload(image) and roll_no):
            return write(roll_no, **fields)
        with images.staged(roll_no, image.filename, image.file.read()) as img:
            return write(roll_no, img=img, **fields)

    @app.get("/member-full-details")
    def member_full_details() -> JSONResponse:
        return JSONResponse(stores.members.list_members())

    @app.post("/add-member")
    def add_member(
        roll_no: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        last_name: Optional[str] = Form(None),
        phone_no: Optional[str] = Form(None),
        address: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
    ) -> JSONResponse:
        """Create a member or fill a placeholder roll number."""

        member, created = _write_member(
            stores.members.add_member, roll_no, image, name=name, last_name=last_name, phone_no=phone_no, address=address
        )
        return JSONResponse(
            status_code=201 if created else 200,
            content={
                "success": True,
                "message": "New member added successfully" if created else "Member details filled in successfully",
                "member": member.as_dict(),
            },
        )

    @app.post("/edit-member")
    def edit_member(
        roll_no: Optional[str] = Form(None),
        name: Optional[str] = Form(None),
        last_name: Optional[str] = Form(None),
        phone_no: Optional[str] = Form(None),
        address: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
    ) -> JSONResponse:
        """Update the supplied fields of a member, creating it when absent."""

        member, created = _write_member(
            stores.members.edit_member, roll_no, image, name=name, last_name=last_name, phone_no=phone_no, address=address
        )
        return JSONResponse(
            status_code=201 if created else 200,
            content={
                "success": True,
                "message": "New member added successfully" if created else "Member details updated successfully",
                "member": member.as_dict(),
            },
        )

    @app.post("/delete-member")
    def delete_member(payload: MemberDeleteRequest) -> JSONResponse:
        outcome = stores.removal.remove(payload.rollNo)
        return JSONResponse(
            {
                "success": True,
                "message": f"Member removed. Total donation of ₹{outcome.removed_total} was added to removed record.",
                "removedTotal": outcome.removed_total,
            }
        )

    @app.get("/all-images")
    def all_images() -> JSONResponse:
        return JSONResponse(images.list_images())

    @app.get("/download-all-images")
    def download_all_images() -> Response:
        return _zip_response(images.archive(), "all-member-images.zip")

    # -- attendance ------------------------------------------------------

    @app.get("/attendance")
    def attendance() -> JSONResponse:
        return JSONResponse(stores.attendance.snapshot())

    @app.post("/update-attendance")
    def update_attendance(payload: AttendanceRequest) -> JSONResponse:
        stores.attendance.mark_present(payload.year, payload.month, payload.day, payload.attendance)
        return JSONResponse({"success": True, "message": "Attendance updated successfully"})

    @app.post("/delete-attendance")
    def delete_attendance(payload: AttendanceRequest) -> JSONResponse:
        deleted = stores.attendance.unmark_present(payload.year, payload.month, payload.day, payload.attendance)
        return JSONResponse({"success": True, "deleted": deleted, "message": "Attendance Deleted"})

    # -- money -----------------------------------------------------------

    @app.get("/donations")
    def donations() -> JSONResponse:
        return JSONResponse(stores.donations.snapshot())

    @app.post("/update-donations")
    def update_donations(payload: DonationRequest) -> JSONResponse:
        kind = payload.type if payload.type is not None else payload.kind
        stores.donations.accumulate(payload.year, payload.month, payload.rollNo, payload.amount, kind)
        label = (kind or "donation").strip().capitalize()
        return JSONResponse({"success": True, "message": f"{label} updated successfully"})

    @app.get("/expenses")
    def expenses() -> JSONResponse:
        return JSONResponse(stores.expenses.snapshot())

    @app.post("/add-expense")
    def add_expense(payload: ExpenseRequest) -> JSONResponse:
        stores.expenses.append(payload.year, payload.month, payload.amount, payload.description)
        return JSONResponse({"success": True, "message": "Expense added successfully"})

    @app.post("/delete-expense")
    def delete_expense(payload: ExpenseDeleteRequest) -> JSONResponse:
        stores.expenses.delete_at(payload.year, payload.month, payload.index)
        return JSONResponse({"success": True, "message": "Expense deleted successfully"})

    @app.get("/overall-summary")
    def overall_summary() -> JSONResponse:
        summary = summarise_overall(stores.donations, stores.expenses)
        return JSONResponse({"success": True, "data": summary.as_dict()})

    @app.get("/monthly-summary")
    def monthly_summary(year: Optional[str] = Query(None), month: Optional[str] = Query(None)) -> JSONResponse:
        summary = summarise_month(stores.donations, stores.expenses, year, month)
        return JSONResponse({"success": True, "data": summary.as_dict()})

    @app.get("/additional")
    def additional() -> JSONResponse:
        return JSONResponse(stores.counters.snapshot())

    # -- archives --------------------------------------------------------

    @app.get("/download-backend")
    def download_backend() -> Response:
        """Stream a ZIP of the data directory, without uploads or backups."""

        buffer = io.BytesIO()
        zip_directory(settings.data_directory, buffer, exclude=archiver.exclude)
        return _zip_response(buffer.getvalue(), "backend.zip")

    return app
