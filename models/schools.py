from sqlalchemy import Column, String, Boolean
from database.db import Base
from models.common import TimestampMixin, new_id


class School(TimestampMixin, Base):
    __tablename__ = "schools"  # schools

    id = Column(String(36), primary_key=True, default=new_id)  # school ID
    name = Column(String(200), nullable=False)                 # school name
    address = Column(String(300))                              # address
    phone = Column(String(20))                                 # phone
    email = Column(String(200))                                # email
    is_active = Column(Boolean, default=True, nullable=False)  # active flag
