"""
HTTP routes exposing the gallery state and actions.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from gallery.controller import GalleryController
from gallery.dependencies import get_controller
from gallery.schemas import GalleryResponse, ImageOut

router = APIRouter()


def _gallery(controller: GalleryController) -> GalleryResponse:
    return GalleryResponse.model_validate(controller.snapshot())


@router.get("/gallery", response_model=GalleryResponse)
def get_gallery(controller: GalleryController = Depends(get_controller)):
    return _gallery(controller)


@router.post("/gallery/reload", response_model=GalleryResponse)
def reload_gallery(controller: GalleryController = Depends(get_controller)):
    controller.load()
    return _gallery(controller)


@router.post("/images", response_model=GalleryResponse, status_code=201)
def upload_image(
    file: UploadFile = File(...),
    controller: GalleryController = Depends(get_controller),
):
    """
    Store an uploaded image inline as a data URI.
    """
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=415, detail="Only image/* uploads are supported")
    controller.upload(
        file.file,
        file.filename or "image",
        content_type=file.content_type,
        size=file.size,
    )
    return _gallery(controller)


@router.get("/images/{image_id}", response_model=ImageOut)
def get_image(image_id: str, controller: GalleryController = Depends(get_controller)):
    image = controller.get(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return ImageOut.model_validate(image.as_dict())


@router.post("/images/{image_id}/like", response_model=GalleryResponse)
def toggle_like(image_id: str, controller: GalleryController = Depends(get_controller)):
    controller.toggle_like(image_id)
    return _gallery(controller)


@router.delete("/images/{image_id}", response_model=GalleryResponse)
def delete_image(image_id: str, controller: GalleryController = Depends(get_controller)):
    controller.delete(image_id)
    return _gallery(controller)


@router.post("/images/{image_id}/select", response_model=GalleryResponse)
def select_image(image_id: str, controller: GalleryController = Depends(get_controller)):
    if controller.select(image_id) is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return _gallery(controller)


@router.post("/selection/close", response_model=GalleryResponse)
def close_selection(controller: GalleryController = Depends(get_controller)):
    controller.close()
    return _gallery(controller)
