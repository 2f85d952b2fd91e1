import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database import init_mongo
from routers.menu_router import router as menu_router
from utils.config import settings
from utils.exceptions import InvalidInput, MenuError
from utils.middleware.logger import LoggingMiddleware, setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("menu.api")

app = FastAPI(title="Menu API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(MenuError)
async def menu_error_handler(request: Request, exc: MenuError):
    logger.warning("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # The body model of the matched route names the entity in the message
    body_model = getattr(request.scope.get("endpoint"), "__annotations__", {}).get("obj_in")
    error = InvalidInput.from_errors(exc.errors(), getattr(body_model, "subject", "Request"))
    logger.warning("InvalidInput on %s: %s", request.url.path, exc.errors())
    return JSONResponse(error.to_dict(), status_code=error.status_code)


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse({"detail": str(exc), "error": "InternalError"}, status_code=500)


@app.on_event("startup")
async def startup_event():
    await init_mongo()


@app.get("/", tags=["Health"])
async def read_root():
    return {"message": "Menu API is running"}


app.include_router(menu_router)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=True)
