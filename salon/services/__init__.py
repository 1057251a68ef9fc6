from salon.services.scheduler import StudioScheduler

__all__ = ["StudioScheduler"]
