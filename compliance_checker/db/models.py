from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, String, JSON, Text, DateTime, func

Base = declarative_base()

#country guides table, one row per jurisdiction (seeded by compliance_checker.ingest)
class CountryGuide(Base):
    """
    static employment regulation profile, keyed by lowercase country code (usa, germany, uk)
    """
    __tablename__ = 'country_guides'

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    key_features = Column(JSON, nullable=False, default=list)

    #category -> requirement detail, passed through to the prompt as is
    regulations = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
