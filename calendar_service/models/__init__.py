from .booked_slots import BookedSlot


__all__ = ["BookedSlot"]
