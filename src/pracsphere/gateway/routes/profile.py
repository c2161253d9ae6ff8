"""头像路由

GET    /api/user/profile-picture: 读取头像（未设置时为 null）
POST   /api/user/profile-picture: 设置头像（data:image/... 或 http(s) URL）
DELETE /api/user/profile-picture: 移除头像
"""

from fastapi import APIRouter, Depends
from pracsphere.core.models import ProfileImageInput
from pydantic import BaseModel

from ..deps import get_current_owner, get_profile_service
from ..services.profile_service import ProfileService

router = APIRouter()


class ProfileImageResponse(BaseModel):
    profile_image: str | None


class ProfileUpdateResponse(BaseModel):
    success: bool
    message: str


@router.get("/api/user/profile-picture", response_model=ProfileImageResponse)
async def get_profile_picture(
    owner: str = Depends(get_current_owner),
    service: ProfileService = Depends(get_profile_service),
):
    return ProfileImageResponse(profile_image=await service.get_profile_image(owner))


@router.post("/api/user/profile-picture", response_model=ProfileUpdateResponse)
async def set_profile_picture(
    body: ProfileImageInput,
    owner: str = Depends(get_current_owner),
    service: ProfileService = Depends(get_profile_service),
):
    await service.set_profile_image(owner, body.image)
    return ProfileUpdateResponse(
        success=True,
        message="Profile picture updated successfully",
    )


@router.delete("/api/user/profile-picture", response_model=ProfileUpdateResponse)
async def remove_profile_picture(
    owner: str = Depends(get_current_owner),
    service: ProfileService = Depends(get_profile_service),
):
    await service.remove_profile_image(owner)
    return ProfileUpdateResponse(
        success=True,
        message="Profile picture removed successfully",
    )
