from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Staff(Base):
    __tablename__ = 'staff'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    avatar_url = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    is_default = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    settings = relationship('StaffSettings', back_populates='staff', uselist=False)
    schedule_rules = relationship('ScheduleRules', back_populates='staff')
    time_blocks = relationship('TimeBlocks', back_populates='staff')
    appointments = relationship('Appointments', back_populates='staff')


class StaffSettings(Base):
    __tablename__ = 'staff_settings'

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False, unique=True)
    timezone = Column(Text, nullable=False, server_default=text("'Asia/Shanghai'"))
    buffer_minutes = Column(Integer, nullable=False, server_default=text('0'))
    calendar_start_hour = Column(Integer, nullable=False, server_default=text('8'))
    calendar_end_hour = Column(Integer, nullable=False, server_default=text('22'))
    id = Column(Integer, primary_key=True)
    open_until = Column(DateTime)

    staff = relationship('Staff', back_populates='settings')


class ScheduleRules(Base):
    __tablename__ = 'schedule_rules'

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    slot_type = Column(Text, nullable=False, server_default=text("'AVAILABLE'"))
    id = Column(Integer, primary_key=True)

    staff = relationship('Staff', back_populates='schedule_rules')


class TimeBlocks(Base):
    __tablename__ = 'time_blocks'

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(Text, nullable=False)
    duration_mins = Column(Integer, nullable=False)
    color = Column(Text, nullable=False, server_default=text("'#6366f1'"))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    staff = relationship('Staff', back_populates='time_blocks')
    appointments = relationship('Appointments', back_populates='time_block')


class Appointments(Base):
    __tablename__ = 'appointments'

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False, index=True)
    time_block_id = Column(ForeignKey('time_blocks.id'), nullable=False)
    client_name = Column(Text, nullable=False)
    # Naive UTC; end_time excludes the staff buffer
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'CONFIRMED'"))
    id = Column(Integer, primary_key=True)
    phone = Column(Text)
    email = Column(Text)
    wechat = Column(Text)
    notes = Column(Text)
    booking_token = Column(Text)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))

    staff = relationship('Staff', back_populates='appointments')
    time_block = relationship('TimeBlocks', back_populates='appointments')


class BookingTokens(Base):
    __tablename__ = 'booking_tokens'

    token = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='SET NULL'))
    time_block_id = Column(ForeignKey('time_blocks.id', ondelete='SET NULL'))
    client_name = Column(Text)
    phone = Column(Text)
    email = Column(Text)
    wechat = Column(Text)
    expires_at = Column(DateTime)
    used_at = Column(DateTime)
    created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))
