from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import init_db
from .logging_setup import configure_logging, request_id_middleware
from .routers import auth, owner, payments

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # init db tables if not using migrations
    await init_db()
    yield


app = FastAPI(title="Laundry Service API", lifespan=lifespan)

# CORS - allow your app domain(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # change to your frontend domains in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

app.include_router(payments.router)
app.include_router(auth.router)
app.include_router(owner.router)


@app.get("/health")
async def health():
    return {"ok": True}


if __name__ == "__main__":
    uvicorn.run("laundry.main:app", host=settings.app_host, port=settings.app_port, reload=(settings.env != "production"))
