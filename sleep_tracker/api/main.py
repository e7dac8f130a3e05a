# sleep_tracker/api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sleep_tracker import __version__
from sleep_tracker.api.routes import sleep_routes, user_profile_routes

app = FastAPI(
    title="Sleep Tracker API",
    description="API for recording sleep sessions, editing profiles and building weekly charts",
    version=__version__
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For development - restrict this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory application state; the host app keeps auth.user here after sign-in
app.state.app_state = {"auth": {"user": None}}

# Include routers
app.include_router(sleep_routes.router)
app.include_router(user_profile_routes.router)


@app.get("/")
async def root():
    return {
        "message": "Welcome to the Sleep Tracker API",
        "version": __version__,
        "documentation": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    from sleep_tracker.api.dependencies import get_config
    from sleep_tracker.utils.logging_config import setup_logging

    config = get_config()
    setup_logging(config.get('logging.level', 'INFO'), config.get('logging.file'))
    uvicorn.run(app, host="0.0.0.0", port=8000)
