# newsreader/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

# Your configuration and DB
from newsreader.config import settings
from newsreader.core.db import init_db, close_db
from newsreader.core.errors import ForbiddenError, LoginRequired, UnauthenticatedError

from newsreader.api.routers import admin, auth, pages, saved

from newsreader.core.bootstrap import ensure_default_admin
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# Guard failures raised by the dependencies in newsreader.api.deps
@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=302)

@app.exception_handler(UnauthenticatedError)
async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)

@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)

@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(saved.router)
app.include_router(admin.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
