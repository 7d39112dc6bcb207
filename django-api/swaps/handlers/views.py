"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to handlers.errors
- Never contain business logic
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from swaps.conf import swap_settings
from swaps.handlers.serializers import (
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    MarkEventSerializer,
    SwapDecisionSerializer,
    SwapRequestCreateSerializer,
    SwapRequestSerializer,
)
from swaps.services.swap_service import SwapService
from swaps.stores.django_store import DjangoSwapStorage


def build_swap_service() -> SwapService:
    config = swap_settings()
    return SwapService(
        DjangoSwapStorage(lock_timeout_ms=config.lock_timeout_ms),
        max_attempts=config.max_attempts,
        retry_backoff_seconds=config.retry_backoff_seconds,
    )


class SwapAPIView(APIView):
    """Base view holding the swap service."""

    def get_service(self) -> SwapService:
        return build_swap_service()


class SwappableEventListView(SwapAPIView):
    """Handler for GET /api/events/swappable/{user_id}"""

    def get(self, request: Request, user_id: int) -> Response:
        events = self.get_service().list_swappable_events(user_id)
        return Response(EventSerializer(events, many=True).data)


class UserEventListView(SwapAPIView):
    """Handler for GET /api/users/{user_id}/events"""

    def get(self, request: Request, user_id: int) -> Response:
        events = self.get_service().list_user_events(user_id)
        return Response(EventSerializer(events, many=True).data)


class IncomingSwapRequestListView(SwapAPIView):
    """Handler for GET /api/users/{user_id}/swap-requests"""

    def get(self, request: Request, user_id: int) -> Response:
        swap_requests = self.get_service().list_incoming_swap_requests(user_id)
        return Response(SwapRequestSerializer(swap_requests, many=True).data)


class EventCreateView(SwapAPIView):
    """Handler for POST /api/events"""

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.get_service().create_event(**serializer.validated_data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(SwapAPIView):
    """Handler for PATCH /api/events/{event_id}"""

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.get_service().update_event(event_id, **serializer.validated_data)
        return Response(EventSerializer(event).data)


class EventStatusView(SwapAPIView):
    """Handler for POST /api/events/{event_id}/status"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = MarkEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.get_service().mark_event(
            event_id, serializer.validated_data["status"]
        )
        return Response(EventSerializer(event).data)


class SwapRequestCreateView(SwapAPIView):
    """Handler for POST /api/swap-requests"""

    def post(self, request: Request) -> Response:
        serializer = SwapRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        swap_request = self.get_service().place_swap_request(
            serializer.validated_data["requestor_event_id"],
            serializer.validated_data["target_event_id"],
        )
        return Response(
            SwapRequestSerializer(swap_request).data, status=status.HTTP_201_CREATED
        )


class SwapDecisionView(SwapAPIView):
    """Handler for POST /api/swap-requests/{swap_request_id}/decision"""

    def post(self, request: Request, swap_request_id: str) -> Response:
        serializer = SwapDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().process_swap_request(
            swap_request_id, accept=serializer.validated_data["accept"]
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
