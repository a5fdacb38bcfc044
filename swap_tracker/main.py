from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swap_tracker.api.routers.observations import router as observations_router
from swap_tracker.api.routers.swap_price import router as swap_price_router

app = FastAPI(title="Swap Tracker API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(swap_price_router)
app.include_router(observations_router)
