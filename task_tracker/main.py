import logging
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlencode

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_tracker import crud
from task_tracker.config import Settings, get_settings
from task_tracker.database import (
    get_db,
    initialize_schema,
    make_engine,
    make_session_factory,
    seed_default_users,
)
from task_tracker.logging_setup import setup_logging
from task_tracker.presenters import edit_context, listing_context, users_context
from task_tracker.queries import TaskFilters, list_tasks
from task_tracker.utils import parse_id

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


# -------------------------
# TASKS
# -------------------------
@router.get("/", response_class=HTMLResponse)
def view_tasks(
    request: Request,
    user_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    db: Session = Depends(get_db),
):
    filters = TaskFilters(user_id=user_id, status=status, priority=priority)
    tasks = list_tasks(db, filters)
    users = crud.list_users(db, order_by="username")

    return templates.TemplateResponse(request, "index.html", listing_context(tasks, users, filters))


@router.post("/")
def create_task(
    title: str = Form(""),
    user_id: str = Form(""),
    priority: str = Form(""),
    db: Session = Depends(get_db),
):
    crud.create_task(db, title, user_id, priority)
    return redirect("/")


@router.get("/complete/{task_id}")
def complete_task(task_id: str, db: Session = Depends(get_db)):
    parsed = parse_id(task_id)
    if parsed is not None:
        crud.complete_task(db, parsed)
    return redirect("/")


@router.get("/delete/{task_id}")
def delete_task(task_id: str, db: Session = Depends(get_db)):
    parsed = parse_id(task_id)
    if parsed is not None:
        crud.delete_task(db, parsed)
    return redirect("/")


@router.get("/edit/{task_id}", response_class=HTMLResponse)
def edit_task_form(request: Request, task_id: str, db: Session = Depends(get_db)):
    parsed = parse_id(task_id)
    if parsed is None:
        return redirect("/")

    outcome = crud.get_task_for_edit(db, parsed)
    if not outcome.ok:
        logger.info("Edit target missing: %s", outcome.error)
        return redirect("/")

    users = crud.list_users(db, order_by="username")
    return templates.TemplateResponse(request, "edit.html", edit_context(outcome.value, users))


@router.post("/edit/{task_id}")
def update_task(
    task_id: str,
    title: str = Form(""),
    user_id: str = Form(""),
    priority: str = Form(""),
    db: Session = Depends(get_db),
):
    parsed = parse_id(task_id)
    if parsed is None:
        return redirect("/")

    outcome = crud.update_task(db, parsed, title, user_id, priority)
    if not outcome.ok:
        return redirect(f"/edit/{parsed}")
    return redirect("/")


# -------------------------
# USERS
# -------------------------
@router.get("/users", response_class=HTMLResponse)
def view_users(request: Request, error: str | None = None, db: Session = Depends(get_db)):
    users = crud.list_users(db, order_by="id")
    return templates.TemplateResponse(request, "users.html", users_context(users, error))


@router.post("/users")
def create_user(username: str = Form(""), db: Session = Depends(get_db)):
    crud.create_user(db, username)
    return redirect("/users")


@router.get("/delete-user/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    parsed = parse_id(user_id)
    if parsed is None:
        return redirect("/users")

    outcome = crud.delete_user(db, parsed)
    if not outcome.ok:
        return redirect("/users?" + urlencode({"error": str(outcome.error)}))
    return redirect("/users")


# -------------------------
# APP
# -------------------------
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(f"Database error: {exc}", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    initialize_schema(app.state.engine)
    with app.state.session_factory() as db:
        seed_default_users(db, app.state.settings.seed_users)
        logger.info(
            "Task tracker ready users=%s tasks=%s",
            crud.count_users(db),
            crud.count_tasks(db),
        )
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    settings = settings or get_settings()
    if engine is None:
        engine = make_engine(settings.database_url, enforce_foreign_keys=settings.enforce_foreign_keys)

    app = FastAPI(title="Task Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.include_router(router)
    return app


_settings = get_settings()
setup_logging(_settings.log_level)
app = create_app(_settings)


def run() -> None:
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_level=_settings.log_level.lower())


if __name__ == "__main__":
    run()
