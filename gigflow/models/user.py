# models/user.py
import uuid
from sqlalchemy import Column, String, CHAR, TIMESTAMP, func
from sqlalchemy.orm import relationship
from gigflow.core.database import Base

class User(Base):
    __tablename__ = "users"

    # 基本欄位
    user_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    # 關聯設定
    gigs_owned = relationship(
        "Gig", # <-- 使用字串
        back_populates="owner",
    )

    bids = relationship(
        "Bid",
        back_populates="freelancer",
    )
