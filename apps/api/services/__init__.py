"""
Services package for MediConnect API
Storage access, mock fallback data, live update fan-out and the AI assistant client
"""

from .live_updates import LiveUpdateHub, LiveEvent
from .storage import HospitalStorage

__all__ = [
    'LiveUpdateHub',
    'LiveEvent',
    'HospitalStorage',
]
