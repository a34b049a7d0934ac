"""
Settlement model for money that has actually changed hands.
"""
from sqlalchemy import Column, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel


class Settlement(BaseModel):
    """A payment from one member to another that reduces outstanding debt."""
    __tablename__ = "settlements"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)

    # Relationships
    group = relationship("Group", back_populates="settlements")
    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])
