# gigflow/core/permissions.py
# 以呼叫者身分判斷是否具備操作某資源的權限
from gigflow.core.exceptions import ForbiddenError
from gigflow.models.bid import Bid
from gigflow.models.gig import Gig
from gigflow.models.user import User


def owns_gig(user: User, gig: Gig) -> bool:
    return gig.owner_id == user.user_id


def owns_bid(user: User, bid: Bid) -> bool:
    return bid.freelancer_id == user.user_id


def require_gig_owner(user: User, gig: Gig, action: str) -> None:
    if not owns_gig(user, gig):
        raise ForbiddenError(f"Not authorized to {action}")


def require_bid_owner(user: User, bid: Bid, action: str) -> None:
    if not owns_bid(user, bid):
        raise ForbiddenError(f"Not authorized to {action}")
