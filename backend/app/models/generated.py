from sqlalchemy import Column, Enum, ForeignKey, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Facilities(Base):
    __tablename__ = 'facilities'

    name = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    start_hour = Column(Integer, nullable=False, server_default=text('9'))
    end_hour = Column(Integer, nullable=False, server_default=text('18'))
    turnover_rules = Column(Text, nullable=False, server_default=text("'[]'"))  # JSON list
    turnover_interval_hours = Column(Integer, nullable=False, server_default=text('8'))
    id = Column(Integer, primary_key=True)
    area = Column(Text)
    phone = Column(Text)
    funeral_block_time = Column(Text)  # "HH:MM"
    wake_min_time = Column(Text)  # optional floor on top of the interval
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    halls = relationship('Halls', back_populates='facility')


class Halls(Base):
    __tablename__ = 'halls'
    __table_args__ = (
        UniqueConstraint('facility_id', 'name'),
    )

    id = Column(Integer, primary_key=True)
    facility_id = Column(ForeignKey('facilities.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    capacity = Column(Integer)  # seats, not bookings
    has_waiting_room = Column(Integer, nullable=False, server_default=text('0'))
    display_order = Column(Integer)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    facility = relationship('Facilities', back_populates='halls')
    schedules = relationship('Schedules', back_populates='hall')
    daily_capacities = relationship('DailyCapacities', back_populates='hall')


class Schedules(Base):
    __tablename__ = 'schedules'
    __table_args__ = (
        # one 葬儀 and one 通夜 per hall per day
        UniqueConstraint('hall_id', 'date', 'slot_type'),
    )

    date = Column(Text, nullable=False)
    hall_id = Column(ForeignKey('halls.id', ondelete='CASCADE'), nullable=False)
    slot_type = Column(Enum('葬儀', '通夜', name='slot_type'), nullable=False)
    status = Column(Text, nullable=False, server_default=text("'occupied'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    ceremony_time = Column(Text)  # "HH:MM"
    family_name = Column(Text)  # NULL only for status = external
    notes = Column(Text)

    hall = relationship('Halls', back_populates='schedules')


class DailyCapacities(Base):
    __tablename__ = 'daily_capacities'
    __table_args__ = (
        UniqueConstraint('date', 'hall_id'),
    )

    id = Column(Integer, primary_key=True)
    date = Column(Text, nullable=False)
    hall_id = Column(ForeignKey('halls.id', ondelete='CASCADE'), nullable=False)
    max_count = Column(Integer, nullable=False)

    hall = relationship('Halls', back_populates='daily_capacities')


class Rokuyo(Base):
    __tablename__ = 'rokuyo'

    date = Column(Text, primary_key=True)
    rokuyo = Column(Text, nullable=False)
    is_tomobiki = Column(Integer, nullable=False, server_default=text('0'))
