"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hotelpms.core.config import settings
from hotelpms.core.errors import NotFoundError, ConflictError
from hotelpms.core.logging import setup_logging
from hotelpms.db.init_db import init_db
from hotelpms.api import room_types, rooms, custom_prices, guests, bookings, invoices, maintenance, analytics


# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize database
init_db()

# Create FastAPI app
app = FastAPI(
    title="Hotel PMS API",
    description="Property management backend: rooms, rates, bookings, billing and maintenance",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


# Include routers
app.include_router(room_types.router, prefix="/api", tags=["room-types"])
app.include_router(rooms.router, prefix="/api", tags=["rooms"])
app.include_router(custom_prices.router, prefix="/api", tags=["custom-prices"])
app.include_router(guests.router, prefix="/api", tags=["guests"])
app.include_router(bookings.router, prefix="/api", tags=["bookings"])
app.include_router(invoices.router, prefix="/api", tags=["invoices"])
app.include_router(maintenance.router, prefix="/api", tags=["maintenance"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hotel PMS API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
