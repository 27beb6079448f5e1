from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime, timezone

from .database import Base, engine, get_db
from .models import Sighting as SightingModel
from .sighting import SightingStatus, coerce_timestamp
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("roadkill-api")

REQUIRED_FIELDS_MESSAGE = "animal, latitude, and longitude are required"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)
    logger.info("Sighting storage ready at %s", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="Roadkill Sightings API", lifespan=lifespan)

# The mobile client runs on arbitrary LAN hosts in development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models for request/response
class SightingCreate(BaseModel):
    animal: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    status: Optional[SightingStatus] = None
    address: Optional[str] = None
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Optional[object]) -> Optional[datetime]:
        # Unparseable values fall back to "now" in the handler
        return coerce_timestamp(v)


class SightingResponse(BaseModel):
    id: str
    animal: str
    status: SightingStatus
    latitude: float
    longitude: float
    address: Optional[str] = None
    timestamp: datetime
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _ensure_utc(cls, v: object) -> object:
        # SQLite hands back naive datetimes; everything is stored as UTC
        return coerce_timestamp(v) or v


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": problems or "Invalid request body"})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("%s %s storage error", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/sightings", response_model=List[SightingResponse])
def list_sightings(db: Session = Depends(get_db)):
    rows = (
        db.query(SightingModel)
        .order_by(SightingModel.timestamp.desc(), SightingModel.created_at.desc())
        .all()
    )
    return rows


@app.post("/sightings", status_code=201)
def create_sighting(sighting: SightingCreate, db: Session = Depends(get_db)):
    animal = (sighting.animal or "").strip()
    if not animal or sighting.latitude is None or sighting.longitude is None:
        logger.info("POST /sightings rejected: animal=%r lat=%s lng=%s", sighting.animal, sighting.latitude, sighting.longitude)
        return JSONResponse(status_code=400, content={"error": REQUIRED_FIELDS_MESSAGE})

    # Default timestamp to now if omitted
    timestamp = sighting.timestamp or datetime.now(timezone.utc)

    row = SightingModel(
        animal=animal,
        status=(sighting.status or SightingStatus.LIVE).value,
        latitude=sighting.latitude,
        longitude=sighting.longitude,
        address=sighting.address or None,
        timestamp=timestamp.astimezone(timezone.utc),
        notes=sighting.notes or None,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Saved sighting id=%s animal=%s status=%s", row.id, row.animal, row.status)
    return {"id": row.id}


@app.delete("/sightings/{sighting_id}")
def delete_sighting(sighting_id: str, db: Session = Depends(get_db)):
    row = db.query(SightingModel).filter(SightingModel.id == sighting_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Sighting not found")
    db.delete(row)
    db.commit()
    logger.info("Deleted sighting id=%s", sighting_id)
    return {"success": True}
