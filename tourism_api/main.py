import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourism_api.api.routes import bookings, events, guides, tour_sites, users
from tourism_api.core.config import CORS_ORIGINS, UPLOAD_DIR, UPLOAD_URL_PREFIX
from tourism_api.core.exception_handlers import error_body, register_exception_handlers

# ⭐ Import logging system
from tourism_api.core.logging_config import get_logger
from tourism_api.utils.image_storage import STAGING_DIRNAME

logger = get_logger()

app = FastAPI(
    title="Tourism Marketplace API",
    version="1.0.0",
    description="API for Touristic Sites, Site Admins, Events, Guides & Bookings"
)


# ⭐ Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# ⭐ CORS (important for frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


# ⭐ Uploaded images, readable from any origin
class UploadedImages(StaticFiles):
    async def get_response(self, path, scope):
        parts = os.path.normpath(path).split(os.sep)
        if parts and parts[0] == STAGING_DIRNAME:
            return JSONResponse(status_code=404, content=error_body("Image not found"))

        try:
            response = await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            # Answer here so the app-wide "route not found" handler never sees it
            if exc.status_code == 404:
                return JSONResponse(status_code=404, content=error_body("Image not found"))
            raise

        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        return response


os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, UploadedImages(directory=UPLOAD_DIR, check_dir=False), name="uploads")

# -------- ROUTERS REGISTER ORDER MATTERS --------
app.include_router(tour_sites.router)
app.include_router(events.router)
app.include_router(users.router)
app.include_router(guides.router)
app.include_router(bookings.router)


@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
