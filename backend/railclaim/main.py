from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from railclaim.api.v1.routes.delay_monitor import router as delay_monitor_router
from railclaim.api.v1.routes.health import router as health_router


app = FastAPI(title="RailClaim API")

# Ops dashboard calls the API directly from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/v1")
app.include_router(delay_monitor_router)
