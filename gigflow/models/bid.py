# gigflow/models/bid.py
import uuid
from sqlalchemy import Column, Text, Numeric, ForeignKey, TIMESTAMP, Enum, CHAR, UniqueConstraint, func
from sqlalchemy.orm import relationship
from gigflow.core.database import Base

BID_STATUS_PENDING = "pending"
BID_STATUS_HIRED = "hired"
BID_STATUS_REJECTED = "rejected"

BidStatusEnum = Enum(BID_STATUS_PENDING, BID_STATUS_HIRED, BID_STATUS_REJECTED, name="bid_status_enum")

class Bid(Base):
    __tablename__ = "bids"
    # 同一位工作者對同一案件只能有一筆提案
    __table_args__ = (
        UniqueConstraint("gig_id", "freelancer_id", name="uq_bids_gig_freelancer"),
    )

    bid_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    gig_id = Column(CHAR(36), ForeignKey("gigs.gig_id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)

    # pending -> hired / rejected；hired 與 rejected 為終態
    status = Column(BidStatusEnum, default=BID_STATUS_PENDING, nullable=False, index=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # --- 建立關聯 (Relationships) ---
    gig = relationship("Gig", back_populates="bids", lazy="joined")

    freelancer = relationship("User", back_populates="bids", lazy="joined")
