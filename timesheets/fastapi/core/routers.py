from fastapi import FastAPI
from timesheets.fastapi.api.v1.endpoints import auth, user, time_entry, admin

def setup_routers(app: FastAPI):
    # Authentication routes (both roles log in through the same endpoint)
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["authentication"])

    # The caller's own timesheet and clock sessions
    app.include_router(user.router, prefix="/api/v1/user", tags=["timesheets"])
    app.include_router(time_entry.router, prefix="/api/v1/user", tags=["time-tracking"])

    # Admin management and reporting routes
    app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])
