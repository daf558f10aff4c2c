"""Recipe catalogue models

These tables are owned by the catalogue service. The recommendations
service only reads them.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Recipe category"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    recipes = relationship("Recipe", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class Recipe(Base, TimestampMixin):
    """Recipe with an optional category"""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    category = relationship("Category", back_populates="recipes")

    def __repr__(self):
        return f"<Recipe(id={self.id}, name='{self.name}')>"
