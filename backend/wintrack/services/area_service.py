# Overview: Service-layer operations for service areas.

from ..extensions import db
from ..models import Area


AREA_STATUSES = ("active", "inactive")


def list_areas(filters: dict | None = None) -> list[Area]:
    filters = filters or {}
    query = db.session.query(Area)
    if filters.get("status"):
        query = query.filter(Area.status == filters["status"])
    return query.order_by(Area.name.asc()).all()


def _validate(name, status) -> None:
    if not name or not str(name).strip():
        raise ValueError("name is required")
    if status not in AREA_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(AREA_STATUSES)}")


def _check_unique(name: str, exclude_id: int | None = None) -> None:
    query = db.session.query(Area).filter(Area.name == name)
    if exclude_id is not None:
        query = query.filter(Area.id != exclude_id)
    if query.first():
        raise ValueError("Area name already exists")


def create_area(data: dict) -> Area:
    name = (data.get("name") or "").strip()
    status = data.get("status") or "active"
    _validate(name, status)
    _check_unique(name)

    area = Area(name=name, description=data.get("description"), status=status)
    db.session.add(area)
    db.session.commit()
    return area


def update_area(area: Area, data: dict) -> Area:
    name = (data.get("name", area.name) or "").strip()
    status = data.get("status", area.status)
    _validate(name, status)
    _check_unique(name, exclude_id=area.id)

    area.name = name
    area.status = status
    if "description" in data:
        area.description = data["description"]
    db.session.commit()
    return area


def delete_area(area: Area) -> None:
    db.session.delete(area)
    db.session.commit()
