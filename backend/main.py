from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import logging

import config
import storage
from database import init_db
from errors import CottageError, cottage_error_handler
from routes import rooms, options, votes, rankings, results, admin

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("cottage")

app = FastAPI(title="Cottage 2026 API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response

app.add_exception_handler(CottageError, cottage_error_handler)

# Include Routers
app.include_router(rooms.router)
app.include_router(options.router)
app.include_router(votes.router)
app.include_router(rankings.router)
app.include_router(results.router)
app.include_router(admin.router)

app.mount(storage.MEDIA_URL_PREFIX, StaticFiles(directory=storage.MEDIA_ROOT), name="media")

@app.on_event("startup")
async def startup_event():
    await init_db()
    logger.info("Database ready")

@app.get("/")
async def root():
    return {"status": "ok", "message": "Cottage 2026 API is running"}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
