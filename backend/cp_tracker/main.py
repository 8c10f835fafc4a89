import logging

from fastapi import FastAPI
from .config import settings
from .database import engine, Base
from .models import document  # noqa: F401  registers the documents table
from .api import analytics, leaderboard, platforms, users

# ---------------- Logger ----------------
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
root_logger = logging.getLogger("cp_tracker")
root_logger.setLevel(settings.LOG_LEVEL.upper())
if not root_logger.handlers:
    root_logger.addHandler(handler)

# This creates the tables. For production, use Alembic migrations.
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="CP Club Tracker",
    description="Platform stats, leaderboards and topic analytics for a competitive-programming club.",
    version="1.0.0"
)

# --- Mount Routers ---
api_prefix = "/api/v1"
app.include_router(users.router, prefix=api_prefix, tags=["Users"])
app.include_router(platforms.router, prefix=api_prefix, tags=["Platforms"])
app.include_router(leaderboard.router, prefix=api_prefix, tags=["Leaderboard"])
app.include_router(analytics.router, prefix=api_prefix, tags=["Analytics"])

@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok", "message": "API is running"}
