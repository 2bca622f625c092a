import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from app.config import LOG_LEVEL, HOST, PORT
from app.database import init_db
from app.routers import auth, users, projects, tasks

logging.basicConfig(
	level=LOG_LEVEL,
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="SynergySphere API", description="Project collaboration backend")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_methods=["*"],
	allow_headers=["*"],
)

# API routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(tasks.router)


@app.get("/health")
def health():
	return {"status": "ok"}


# Generic error handler to return JSON errors for unexpected exceptions;
# HTTPException subclasses are rendered by FastAPI's own handler
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
	logger.exception("unhandled error on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def run():
	"""Serve the API with uvicorn (``synergysphere`` console script)."""
	uvicorn.run("app.main:app", host=HOST, port=PORT)
