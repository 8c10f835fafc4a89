from sqlalchemy import Column, Integer, String, JSON, TIMESTAMP, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base

class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc"),)

    id = Column(Integer, primary_key=True, index=True)
    collection = Column(String(100), nullable=False, index=True)
    doc_id = Column(String(255), nullable=False)

    data = Column(JSON, nullable=False, default=dict)

    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
