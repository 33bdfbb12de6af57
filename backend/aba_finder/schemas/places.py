from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


SearchMethod = Literal["website", "name_address", "none"]


class PlaceReview(BaseModel):
    model_config = ConfigDict(extra="ignore")

    author_name: str
    author_url: str | None = None
    language: str | None = None
    profile_photo_url: str | None = None
    rating: float
    relative_time_description: str | None = None
    text: str = ""
    time: int
    stars: str = ""
    date_display: str = ""


class PlaceDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    place_id: str
    name: str
    formatted_address: str | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    website: str | None = None
    phone: str | None = None
    reviews: list[PlaceReview] = Field(default_factory=list)


class ProviderReviewsResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    place: PlaceDetails | None = None
    reviews: list[PlaceReview] = Field(default_factory=list)
    search_method: SearchMethod = "none"
    errors: list[str] = Field(default_factory=list)
