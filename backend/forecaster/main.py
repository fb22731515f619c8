from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forecaster.config import settings
from forecaster.api.routes import forecasts, health, projects

app = FastAPI(title="Delivery Forecaster", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(forecasts.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
