from django.urls import path

from swaps.handlers import (
    EventCreateView,
    EventDetailView,
    EventStatusView,
    IncomingSwapRequestListView,
    SwapDecisionView,
    SwapRequestCreateView,
    SwappableEventListView,
    UserEventListView,
)

urlpatterns = [
    path("events", EventCreateView.as_view(), name="event-create"),
    path(
        "events/swappable/<int:user_id>",
        SwappableEventListView.as_view(),
        name="swappable-event-list",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/status",
        EventStatusView.as_view(),
        name="event-status",
    ),
    path("users/<int:user_id>/events", UserEventListView.as_view(), name="user-events"),
    path(
        "users/<int:user_id>/swap-requests",
        IncomingSwapRequestListView.as_view(),
        name="incoming-swap-requests",
    ),
    path("swap-requests", SwapRequestCreateView.as_view(), name="swap-request-create"),
    path(
        "swap-requests/<str:swap_request_id>/decision",
        SwapDecisionView.as_view(),
        name="swap-decision",
    ),
]
