from swaps.handlers.views import (
    EventCreateView,
    EventDetailView,
    EventStatusView,
    IncomingSwapRequestListView,
    SwapDecisionView,
    SwapRequestCreateView,
    SwappableEventListView,
    UserEventListView,
)

__all__ = [
    "EventCreateView",
    "EventDetailView",
    "EventStatusView",
    "IncomingSwapRequestListView",
    "SwapDecisionView",
    "SwapRequestCreateView",
    "SwappableEventListView",
    "UserEventListView",
]
