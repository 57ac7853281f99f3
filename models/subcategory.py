from sqlalchemy import Integer, Column, String, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from models.base import Base


# Merchandising grouping below a category. Owns the tier tables shared by all of its products.
class Subcategory(Base):
    __tablename__ = 'subcategories'

    id = Column(Integer, primary_key=True, unique=True)
    name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False)
    show_number = Column(Integer, nullable=False, default=0)
    # Cost price per unit, used by the profit report
    purchase_rate = Column(Numeric(12, 2), nullable=True)

    price_tiers = relationship("PriceTier", back_populates="subcategory", cascade="all, delete-orphan")
