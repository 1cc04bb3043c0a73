import logging
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi.openapi.utils import get_openapi
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tastebuddy.core.config import settings
from tastebuddy.db.database import init_db, async_engine
from tastebuddy.api import (
    achievements,
    admin,
    auth,
    comments,
    compliments,
    follow,
    meals,
    notifications,
    recipe_book,
    recipes,
    users
)
from tastebuddy.core.exceptions import (
    CustomHTTPException,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler
)
from tastebuddy.core.security import OAUTH2_SCOPES


logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info(f"{settings.PROJECT_TITLE} started ({settings.ENVIRONMENT})")
    yield
    await async_engine.dispose()

app = FastAPI(
    title=settings.PROJECT_TITLE,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception Handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(CustomHTTPException, http_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# API Routers
api_router = APIRouter(prefix=settings.API_PREFIX)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(follow.router)
api_router.include_router(achievements.router)
api_router.include_router(admin.router)
api_router.include_router(recipes.router)
api_router.include_router(comments.router)
api_router.include_router(compliments.router)
api_router.include_router(meals.router)
api_router.include_router(notifications.router)
api_router.include_router(recipe_book.router)


@api_router.get("/health", tags=["Health"])
async def api_health():
    return {"success": True, "data": {"status": "healthy", "version": settings.PROJECT_VERSION}}


app.include_router(api_router)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=settings.PROJECT_TITLE,
        version=settings.PROJECT_VERSION,
        description=settings.PROJECT_DESCRIPTION,
        routes=app.routes,
    )

    security_scheme = {
        "OAuth2PasswordBearer": {
            "type": "oauth2",
            "flows": {
                "password": {
                    "tokenUrl": f"{settings.API_PREFIX}/auth/login",
                    "scopes": OAUTH2_SCOPES
                }
            }
        }
    }

    # Merge security scheme with existing components
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {}).update(security_scheme)

    for path in openapi_schema["paths"].values():
        for operation in path.values():
            if any(tag in operation.get("tags", []) for tag in ["Admin", "Compliments", "Follow", "Notifications", "Recipe Book"]):
                operation.setdefault("security", []).append({"OAuth2PasswordBearer": []})

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


@app.get("/", include_in_schema=False)
async def health_check():
    return {
        "status": "healthy",
        "version": settings.PROJECT_VERSION,
        "docs": "/docs"
    }
