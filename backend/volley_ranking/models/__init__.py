from .athlete import Athlete
from .evaluation import ExecutionRecord, QualitativeEventRecord
from .offline_event import OfflineBase, OfflineEvent

__all__ = [
    "Athlete",
    "ExecutionRecord",
    "QualitativeEventRecord",
    "OfflineBase",
    "OfflineEvent",
]
