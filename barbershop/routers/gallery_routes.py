# barbershop/routers/gallery_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import get_current_user
from barbershop.db import get_session
from barbershop.deps import require_role
from barbershop.models import GalleryImage
from barbershop.schemas import GalleryImageCreate, GalleryImagePublic, UserRole

router = APIRouter(
    prefix="/gallery",
    tags=["gallery"],
)


@router.get("", response_model=List[GalleryImagePublic])
def list_images(session: Session = Depends(get_session)):
    return session.exec(select(GalleryImage).order_by(GalleryImage.created_at.desc())).all()


@router.post("", response_model=GalleryImagePublic, status_code=201)
def add_image(
    image: GalleryImageCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_image = GalleryImage(url=image.url, alt=image.alt)
    session.add(db_image)
    session.commit()
    session.refresh(db_image)
    return db_image


@router.delete("/{image_id}", status_code=204)
def delete_image(
    image_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, UserRole.admin.value)

    db_image = session.get(GalleryImage, image_id)
    if db_image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    session.delete(db_image)
    session.commit()
