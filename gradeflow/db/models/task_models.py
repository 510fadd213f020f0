# /gradeflow/db/models/task_models.py

"""
SQLAlchemy model for a grading `Task`. Tasks are never physically removed;
deletion moves `task_status` to DELETED.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey

from ..base_class import Base

class Task(Base):
    id = Column(String, primary_key=True, index=True)
    test = Column(String, ForeignKey("tests.id"), nullable=False, index=True)
    user = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    task_type = Column(String, nullable=False)
    task_status = Column(String, nullable=False, index=True, default="PENDING")
    due_date = Column(DateTime(timezone=True), nullable=True)

    completed_by = Column(String, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Unique so a retried transition can never spawn a second follow-up task.
    source_task = Column(String, ForeignKey("tasks.id"), nullable=True, unique=True)

    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_by = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_by = Column(String, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
