"""
Pydantic schemas for API responses and requests
"""
from app.models.group import GroupBase  # Re-export from models
from app.models.image import ImageBase  # Re-export from models
from app.models.labeler import LabelerBase  # Re-export from models
from app.models.tag import TagBase  # Re-export from models
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.export import ExportData, ExportImageData
from app.schemas.final_tag import FinalTagResponse, TagStatistic, UpdateFinalTagsRequest
from app.schemas.group import (
    AddLabelerToGroupRequest,
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
)
from app.schemas.image import (
    AdminImageDetailResponse,
    ImageDataResponse,
    ImageResponse,
    ImageUploadRequest,
)
from app.schemas.labeler import (
    LabelerCreate,
    LabelerImageDetailResponse,
    LabelerImageItem,
    LabelerListResponse,
    LabelerResponse,
    LabelerUpdate,
    SimpleLabelerResponse,
    SuggestTagsRequest,
    SuggestTagsResponse,
    UpdateImageTagsRequest,
    UpdateImageTagsResponse,
)
from app.schemas.tag import TagCreate, TagDetailResponse, TagResponse, TagUpdate

__all__ = [
    # Common
    "ApiResponse",
    "MessageResponse",
    # Auth
    "LoginRequest",
    "LoginResponse",
    # Group schemas
    "GroupBase",
    "GroupCreate",
    "GroupResponse",
    "GroupListResponse",
    "GroupDetailResponse",
    "AddLabelerToGroupRequest",
    # Image schemas
    "ImageBase",
    "ImageUploadRequest",
    "ImageResponse",
    "ImageDataResponse",
    "AdminImageDetailResponse",
    # Labeler schemas
    "LabelerBase",
    "LabelerCreate",
    "LabelerUpdate",
    "LabelerResponse",
    "LabelerListResponse",
    "SimpleLabelerResponse",
    "LabelerImageItem",
    "LabelerImageDetailResponse",
    "UpdateImageTagsRequest",
    "UpdateImageTagsResponse",
    "SuggestTagsRequest",
    "SuggestTagsResponse",
    # Tag schemas
    "TagBase",
    "TagCreate",
    "TagUpdate",
    "TagResponse",
    "TagDetailResponse",
    # Consensus
    "TagStatistic",
    "FinalTagResponse",
    "UpdateFinalTagsRequest",
    # Export
    "ExportData",
    "ExportImageData",
]
