import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit

from pydantic import ValidationError

from aba_finder.core.errors import ProxyError
from aba_finder.schemas.places import PlaceDetails, PlaceReview, ProviderReviewsResponse
from aba_finder.services.places_proxy import PlacesProxy


logger = logging.getLogger(__name__)

TEXT_SEARCH_PATH = "textsearch/json"
DETAILS_PATH = "details/json"
DETAIL_FIELDS = "place_id,name,formatted_address,rating,user_ratings_total,reviews,website,formatted_phone_number"
MAX_STARS = 5


class PlacesLookupError(RuntimeError):
    pass


def extract_domain(website: str) -> str:
    candidate = website if website.startswith("http") else f"https://{website}"
    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        return website
    if not host:
        return website
    return host.removeprefix("www.")


def format_review_date(timestamp: int) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return f"{moment:%B} {moment.day}, {moment.year}"


def render_star_rating(rating: float) -> str:
    full = max(0, min(MAX_STARS, math.floor(rating)))
    return "★" * full + "☆" * (MAX_STARS - full)


def _to_review(raw: Any) -> PlaceReview:
    if not isinstance(raw, Mapping):
        raise PlacesLookupError("Unexpected review record from places API")
    decorated = dict(raw)
    try:
        decorated["stars"] = render_star_rating(float(raw.get("rating") or 0))
        if isinstance(raw.get("time"), int):
            decorated["date_display"] = format_review_date(raw["time"])
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise PlacesLookupError("Malformed review record from places API") from exc
    return PlaceReview.model_validate(decorated)


def _to_place(raw: Any) -> PlaceDetails:
    if not isinstance(raw, Mapping):
        raise PlacesLookupError("Unexpected place record from places API")
    try:
        return PlaceDetails(
            place_id=raw.get("place_id"),
            name=raw.get("name"),
            formatted_address=raw.get("formatted_address"),
            rating=raw.get("rating"),
            user_ratings_total=raw.get("user_ratings_total"),
            website=raw.get("website"),
            phone=raw.get("formatted_phone_number"),
            reviews=[_to_review(item) for item in raw.get("reviews") or []],
        )
    except ValidationError as exc:
        raise PlacesLookupError("Incomplete place record from places API") from exc


class PlacesLookup:
    """Finds a provider's listing and reviews through the places proxy."""

    def __init__(self, proxy: PlacesProxy) -> None:
        self._proxy = proxy

    async def _query(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        reply = await self._proxy.forward_get(path, params)
        payload = reply.payload
        if not isinstance(payload, dict):
            raise PlacesLookupError("Unexpected response from places API")
        if payload.get("status") == "REQUEST_DENIED":
            raise PlacesLookupError("Search request denied")
        return payload

    async def validate_credential(self) -> tuple[bool, str | None]:
        try:
            await self._query(TEXT_SEARCH_PATH, {"query": "test"})
        except PlacesLookupError:
            return False, "API configuration error"
        except ProxyError:
            return False, "Network error or configuration issue"
        return True, None

    async def search_place_by_website(self, website: str) -> PlaceDetails | None:
        domain = extract_domain(website)
        payload = await self._query(TEXT_SEARCH_PATH, {"query": domain})
        results = payload.get("results") or []
        if payload.get("status") != "OK" or not results:
            return None

        best = next(
            (
                place
                for place in results
                if isinstance(place, Mapping) and place.get("website") and extract_domain(place["website"]) == domain
            ),
            results[0],
        )
        return _to_place(best)

    async def search_place_by_name_and_address(self, provider_name: str, address: str) -> PlaceDetails | None:
        query = f"{provider_name} {address}".strip()
        payload = await self._query(TEXT_SEARCH_PATH, {"query": query})
        results = payload.get("results") or []
        if payload.get("status") != "OK" or not results:
            return None
        return _to_place(results[0])

    async def get_place_details(self, place_id: str) -> PlaceDetails | None:
        payload = await self._query(DETAILS_PATH, {"place_id": place_id, "fields": DETAIL_FIELDS})
        if payload.get("status") != "OK" or not payload.get("result"):
            return None
        return _to_place(payload["result"])

    async def search_and_get_reviews(
        self,
        provider_name: str,
        address: str,
        website: str | None = None,
    ) -> ProviderReviewsResponse:
        errors: list[str] = []

        valid, reason = await self.validate_credential()
        if not valid:
            errors.append(f"API key validation failed: {reason}")
            return ProviderReviewsResponse(errors=errors)

        place: PlaceDetails | None = None
        method = "none"

        if website:
            try:
                place = await self.search_place_by_website(website)
            except (PlacesLookupError, ProxyError) as exc:
                errors.append(f"Website search failed: {exc}")
            else:
                if place is not None:
                    method = "website"
                else:
                    errors.append(f"No place found for website: {website}")

        if place is None:
            try:
                place = await self.search_place_by_name_and_address(provider_name, address)
            except (PlacesLookupError, ProxyError) as exc:
                errors.append(f"Name/address search failed: {exc}")
            else:
                if place is not None:
                    method = "name_address"
                else:
                    errors.append(f"No place found for name/address: {provider_name} {address}".rstrip())

        if place is None:
            return ProviderReviewsResponse(errors=errors)

        reviews: list[PlaceReview] = []
        try:
            details = await self.get_place_details(place.place_id)
        except (PlacesLookupError, ProxyError) as exc:
            logger.warning("Review lookup failed for %s: %s", place.place_id, exc)
            errors.append(f"Failed to get reviews: {exc}")
        else:
            if details is not None:
                reviews = details.reviews

        return ProviderReviewsResponse(
            place=place.model_copy(update={"reviews": reviews}),
            reviews=reviews,
            search_method=method,
            errors=errors,
        )
