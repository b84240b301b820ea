from sqlalchemy import Column, Integer, String, Float
from shared.config.database import Base

class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"schema": "product_schema"}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    image_url = Column(String, nullable=True)
    merchant_id = Column(Integer, nullable=False, index=True)  # auth_schema.users.id of the seller
