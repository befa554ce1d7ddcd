"""User schemas for API request/response."""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """User registration schema (JSON body)."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1)
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    phone: str | None = None
    company_id: int | None = Field(None, alias="companyId")
    is_superuser: bool = Field(False, alias="isSuperuser")

    model_config = {"populate_by_name": True}


class UserUpdateForm(BaseModel):
    """Multipart fields accompanying a profile update."""

    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    phone: str | None = None
    company_department: str | None = Field(None, alias="companyDepartment")
    about_me: str | None = Field(None, alias="aboutMe")
    allergies_or_preferences: str | None = Field(None, alias="allergiesOrPreferences")
    quality: int | None = Field(None, ge=0, le=100)

    model_config = {"populate_by_name": True}


class UserSummaryDTO(BaseModel):
    """User as listed among participants."""

    id: int
    email: str
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")

    model_config = {"populate_by_name": True, "from_attributes": True}


class UserDTO(UserSummaryDTO):
    """User response schema."""

    phone: str | None = None
    company_department: str | None = Field(None, alias="companyDepartment")
    about_me: str | None = Field(None, alias="aboutMe")
    allergies_or_preferences: str | None = Field(None, alias="allergiesOrPreferences")
    profile_image_url: str | None = Field(None, alias="profileImageUrl")
    # data URL of the compressed variant
    profile_image: str | None = Field(None, alias="profileImage")
    company_id: int | None = Field(None, alias="companyId")
    is_active: bool = Field(True, alias="isActive")
    is_superuser: bool = Field(False, alias="isSuperuser")
