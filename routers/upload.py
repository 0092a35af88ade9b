from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from security import get_current_user
from uploads import save_upload

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=dict)
def upload_image(image: Optional[UploadFile] = File(None), current_user: dict = Depends(get_current_user)):
    return save_upload(image)
