# /gradeflow/db/models/result_models.py

from sqlalchemy import Column, String, Float, JSON, DateTime, ForeignKey, UniqueConstraint

from ..base_class import Base

class StudentTestResult(Base):
    """
    SQLAlchemy model for the marks one student obtained on one test.
    There is at most one result per (student, test) pair.
    """
    __tablename__ = "student_test_results"
    __table_args__ = (UniqueConstraint("student", "test", name="uq_student_test_result"),)

    id = Column(String, primary_key=True, index=True)
    student = Column(String, nullable=False, index=True)
    test = Column(String, ForeignKey("tests.id"), nullable=False, index=True)

    marks = Column(JSON, nullable=False, default=list)
    average_mark = Column(Float, nullable=False, default=0)
    test_outcome = Column(String, nullable=False, default="INDETERMINATE")

    mark_entry_date = Column(DateTime(timezone=True), nullable=False)
    mark_validated_date = Column(DateTime(timezone=True), nullable=True)
    student_test_result_status = Column(String, nullable=False, index=True, default="PENDING")

    created_by = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_by = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_by = Column(String, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
