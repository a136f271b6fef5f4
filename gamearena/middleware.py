"""
Response headers for the JSON API
"""
from django.utils.cache import add_never_cache_headers

API_PREFIX = "/api/"


class NoCacheMiddleware:
    """
    Marks every API response as never cacheable.

    Slot counts change with every registration, so a cached availability
    response would show a stale number of remaining slots.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if request.path.startswith(API_PREFIX):
            add_never_cache_headers(response)
            response["Pragma"] = "no-cache"

        return response
