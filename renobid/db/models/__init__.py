from renobid.db.models.bid import Bid
from renobid.db.models.notification import Notification
from renobid.db.models.project import Project
from renobid.db.models.ranking import ContractorRanking
from renobid.db.models.user import User

__all__ = [
    "Bid",
    "ContractorRanking",
    "Notification",
    "Project",
    "User",
]
