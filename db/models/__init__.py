from .user import User
from .category import PlasticCategory
from .weighing import WeighingSession, WeighingItem
from .closing_period import ClosingPeriod
from .activity_log import DeletionLog

__all__ = [n for n in dir() if n[:1].isupper()]
