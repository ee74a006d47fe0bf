# riskboard/crud/location.py
from typing import List, Optional
from sqlalchemy.orm import Session

from riskboard.core.rules import BOUNDED_LEVELS
from riskboard.models.location import Location
from riskboard.schemas.location import LocationCreate, LocationUpdate, ThresholdsIn


def get_location(db: Session, location_id: int) -> Optional[Location]:
    return db.get(Location, location_id)


def get_location_by_name(db: Session, name: str) -> Optional[Location]:
    return db.query(Location).filter(Location.name == name).first()


def list_locations(db: Session, registry: Optional[str] = None) -> List[Location]:
    q = db.query(Location)
    if registry:
        q = q.filter(Location.registry == registry)
    return q.order_by(Location.registry.asc(), Location.name.asc(), Location.id.asc()).all()


def _apply_thresholds(obj: Location, values: Optional[ThresholdsIn]) -> None:
    for level in BOUNDED_LEVELS:
        setattr(obj, f"threshold_{level}", getattr(values, level) if values else None)


def create_location(db: Session, payload: LocationCreate) -> Location:
    obj = Location(
        name=payload.name,
        registry=payload.registry,
        hazard_class=payload.hazard_class,
        revision_date=payload.revision_date,
    )
    _apply_thresholds(obj, payload.thresholds)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_location(db: Session, obj: Location, payload: LocationUpdate) -> Location:
    data = payload.model_dump(exclude_unset=True)
    for k in ("name", "hazard_class"):
        if k in data and data[k] is None:
            data.pop(k)
    for k, v in data.items():
        setattr(obj, k, v)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def set_thresholds(db: Session, obj: Location, values: Optional[ThresholdsIn]) -> Location:
    """Store a custom threshold set; None resets the location to the defaults."""
    _apply_thresholds(obj, values)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_location(db: Session, obj: Location) -> None:
    db.delete(obj)
    db.commit()
