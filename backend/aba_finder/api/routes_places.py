from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from aba_finder.api.deps import get_places_proxy
from aba_finder.core.errors import BadRequestError
from aba_finder.schemas.places import ProviderReviewsResponse
from aba_finder.services.places_lookup import PlacesLookup
from aba_finder.services.places_proxy import PlacesProxy, UpstreamReply

router = APIRouter(prefix="/api", tags=["places"])


def _relay(reply: UpstreamReply) -> Response:
    return Response(content=reply.body, status_code=reply.status_code, media_type="application/json")


@router.get("/google-places/{subresource:path}")
async def forward_places_get(
    subresource: str,
    request: Request,
    proxy: PlacesProxy = Depends(get_places_proxy),
) -> Response:
    # Request Example:
    # GET /api/google-places/textsearch/json?query=Walmart
    #
    # Response Example:
    # 200
    # {"status":"OK","results":[...]}
    reply = await proxy.forward_get(subresource, request.query_params.multi_items())
    return _relay(reply)


@router.post("/google-places")
async def forward_places_post(
    request: Request,
    proxy: PlacesProxy = Depends(get_places_proxy),
) -> Response:
    # Request Example:
    # POST /api/google-places
    # {"url":"https://maps.googleapis.com/maps/api/place/details/json?place_id=abc"}
    try:
        body = await request.json()
    except ValueError as exc:
        raise BadRequestError("Request body must be JSON") from exc
    reply = await proxy.forward_post(body)
    return _relay(reply)


@router.get("/provider-reviews", response_model=ProviderReviewsResponse)
async def get_provider_reviews(
    name: str = Query(..., min_length=1),
    address: str = Query(default=""),
    website: str | None = Query(default=None),
    proxy: PlacesProxy = Depends(get_places_proxy),
) -> ProviderReviewsResponse:
    return await PlacesLookup(proxy).search_and_get_reviews(name, address, website)
