from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import rates, shipping

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("flat_rate_shipping")

# Create tables on import; no migrations for this schema yet
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Flat Rate Shipping",
    description="Flat-rate shipping quotes for carts in a multi-provider rate pipeline",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(rates.router, prefix="/api")
app.include_router(shipping.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "flat-rate-shipping"}
