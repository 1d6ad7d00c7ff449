"""
FastAPI routers grouped by domain.

Each file inside this package exposes an APIRouter that is included in the
application built by interncoach.app.create_app.
"""
