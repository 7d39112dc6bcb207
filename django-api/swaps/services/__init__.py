from swaps.services.swap_service import SwapService

__all__ = ["SwapService"]
