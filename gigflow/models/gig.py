# models/gig.py
import uuid
from sqlalchemy import Column, String, TEXT, Numeric, TIMESTAMP, ForeignKey, Enum, CHAR, func
from sqlalchemy.orm import relationship
from gigflow.core.database import Base

GIG_STATUS_OPEN = "open"
GIG_STATUS_ASSIGNED = "assigned"

GigStatusEnum = Enum(GIG_STATUS_OPEN, GIG_STATUS_ASSIGNED, name="gig_status_enum")

class Gig(Base):
    __tablename__ = "gigs"

    gig_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    budget = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    # open -> assigned 只會發生一次，且只能經由 HiringService
    status = Column(GigStatusEnum, default=GIG_STATUS_OPEN, nullable=False, index=True)
    # 不設外鍵：bids 也參照 gigs，避免循環外鍵
    hired_bid_id = Column(CHAR(36), nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # 雇主 (一)
    owner = relationship(
        "User",
        back_populates="gigs_owned",
        lazy="joined"
    )

    # 提案 (多)；刪除案件時一併刪除
    bids = relationship(
        "Bid",
        back_populates="gig",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
